import os

# keep the API module from touching a history file in the working directory
os.environ.setdefault("PHISHGUARD_STORE_BACKEND", "memory")

from datetime import datetime, timedelta, timezone

import pytest

from phishguard.models import Category, RiskFactor, ScanResult

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_result(i=0, category=Category.SAFE, score=None):
    if score is None:
        score = {Category.SAFE: 100, Category.SUSPICIOUS: 60,
                 Category.PHISHING: 20, Category.INVALID: 0}[category]
    return ScanResult(
        url=f"https://site{i}.example.com",
        score=score,
        category=category,
        factors=(RiskFactor(weight=10, description=f"factor {i}", kind="test"),),
        timestamp=BASE_TIME + timedelta(seconds=i),
    )


@pytest.fixture
def result_factory():
    return make_result
