"""
scanner.py
Scores a URL: normalize, run the detectors, aggregate, classify, record.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from ..errors import ParseError
from ..models import Category, RiskFactor, ScanResult
from .heuristics import run_detectors
from .normalizer import normalize_url, precheck

logger = logging.getLogger("scanner")

MAX_SCORE = 100
SAFE_THRESHOLD = 80        # score >= 80 => Safe
SUSPICIOUS_THRESHOLD = 50  # 50 <= score < 80 => Suspicious, below => Phishing

NO_THREATS = "No obvious threats detected"
INVALID_FORMAT = "Invalid URL Format"


def classify(score: int) -> Category:
    if score >= SAFE_THRESHOLD:
        return Category.SAFE
    if score >= SUSPICIOUS_THRESHOLD:
        return Category.SUSPICIOUS
    return Category.PHISHING


def aggregate(factors: Iterable[RiskFactor]) -> Tuple[int, Category]:
    """Trust score (100 minus the summed weights, clamped to 0..100) and its category."""
    total = sum(f.weight for f in factors)
    score = max(0, min(MAX_SCORE, MAX_SCORE - total))
    return score, classify(score)


def build_result(raw: str, factors: Iterable[RiskFactor], timestamp: datetime) -> ScanResult:
    factors = tuple(factors)
    score, category = aggregate(factors)
    if category is Category.SAFE and not factors:
        factors = (RiskFactor.informational(NO_THREATS),)
    return ScanResult(url=raw, score=score, category=category, factors=factors, timestamp=timestamp)


def invalid_result(raw: str, timestamp: datetime) -> ScanResult:
    return ScanResult(
        url=raw,
        score=0,
        category=Category.INVALID,
        factors=(RiskFactor.informational(INVALID_FORMAT),),
        timestamp=timestamp,
    )


def scan_url(raw: str, store=None, now: Optional[datetime] = None) -> ScanResult:
    """
    Score a single URL and, when a store is given, append the result to it.

    Raises InputRejected (EmptyInput / MissingDot) for input the caller
    should have refused. Unparseable URLs come back as an Invalid result.
    """
    url = precheck(raw)
    timestamp = now or datetime.now(timezone.utc)

    try:
        parsed = normalize_url(url)
    except ParseError as e:
        logger.info("Invalid URL %r: %s", url, e)
        result = invalid_result(url, timestamp)
    else:
        result = build_result(url, run_detectors(url, parsed), timestamp)
        logger.debug("Scanned %s -> %d (%s)", url, result.score, result.category.value)

    if store is not None:
        store.append(result)
    return result
