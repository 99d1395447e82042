from datetime import datetime, timezone

import pytest

from phishguard.app.scanner import aggregate, classify, scan_url
from phishguard.errors import EmptyInput, MissingDot
from phishguard.models import Category, RiskFactor
from phishguard.store import ScanRecordStore

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

SAMPLE_URLS = [
    "https://google.com",
    "google.com",
    "http://192.168.0.10/account",
    "http://paypa1.com/login",
    "https://accounts.google.com/signin",
    "http://user@secure-login-verify-account.update.example.xyz/" + "x" * 80,
    "http://exa mple.com",
    "https://abcdefghijklmnopqrstuvwxyz.com/wallet",
]


def factors_of(*weights):
    return [RiskFactor(weight=w, description=f"w{w}") for w in weights]


@pytest.mark.parametrize("score,expected", [
    (100, Category.SAFE),
    (80, Category.SAFE),
    (79, Category.SUSPICIOUS),
    (50, Category.SUSPICIOUS),
    (49, Category.PHISHING),
    (0, Category.PHISHING),
])
def test_classify_boundaries(score, expected):
    assert classify(score) is expected


def test_aggregate_sums_and_clamps():
    assert aggregate([]) == (100, Category.SAFE)
    assert aggregate(factors_of(20)) == (80, Category.SAFE)
    assert aggregate(factors_of(35, 15)) == (50, Category.SUSPICIOUS)
    assert aggregate(factors_of(51)) == (49, Category.PHISHING)
    assert aggregate(factors_of(35, 25, 30, 15, 10)) == (0, Category.PHISHING)


def test_scenario_clean_https():
    r = scan_url("https://google.com", now=NOW)
    assert r.score == 100
    assert r.category is Category.SAFE
    assert r.descriptions == ("No obvious threats detected",)
    assert r.timestamp == NOW


def test_scenario_ip_literal():
    r = scan_url("http://192.168.0.10/account")
    assert r.score == 40
    assert r.category is Category.PHISHING
    assert [f.weight for f in r.factors] == [35, 15, 10]


def test_scenario_homoglyph_typosquat():
    r = scan_url("http://paypa1.com/login")
    assert r.score == 45
    assert r.category is Category.PHISHING
    assert [f.kind for f in r.factors] == ['insecure_scheme', 'typosquat', 'sensitive_keyword']


def test_scenario_missing_dot_rejected_before_scoring():
    store = ScanRecordStore()
    with pytest.raises(MissingDot):
        scan_url("not a url", store=store)
    with pytest.raises(EmptyInput):
        scan_url("   ", store=store)
    assert len(store) == 0


def test_scenario_google_subdomain_not_typosquat():
    r = scan_url("https://accounts.google.com/signin")
    assert r.category is Category.SAFE
    assert 'typosquat' not in [f.kind for f in r.factors]
    # "accounts" contains the keyword "account"
    assert [f.kind for f in r.factors] == ['sensitive_keyword']
    assert r.score == 90


def test_mail_google_com_is_clean():
    r = scan_url("https://mail.google.com")
    assert r.score == 100


def test_parse_failure_gives_invalid_result():
    r = scan_url("http://exa mple.com")
    assert r.category is Category.INVALID
    assert r.score == 0
    assert r.descriptions == ("Invalid URL Format",)


def test_real_urls_on_the_boundaries():
    # 10 (TLD) + 10 (keyword)
    assert scan_url("https://example.xyz/login").category is Category.SAFE
    assert scan_url("https://example.xyz/login").score == 80
    # 15 (http) + 25 (@) + 10 (keyword)
    r = scan_url("http://user@example.com/login")
    assert r.score == 50
    assert r.category is Category.SUSPICIOUS


def test_input_is_trimmed_before_scoring():
    r = scan_url("  https://google.com  ")
    assert r.url == "https://google.com"
    assert r.score == 100


@pytest.mark.parametrize("url", SAMPLE_URLS)
def test_score_range_and_category_consistency(url):
    r = scan_url(url)
    assert 0 <= r.score <= 100
    if r.category is Category.INVALID:
        assert r.score == 0
    else:
        assert r.category is classify(r.score)


@pytest.mark.parametrize("url", SAMPLE_URLS)
def test_scoring_is_deterministic(url):
    assert scan_url(url, now=NOW) == scan_url(url, now=NOW)


@pytest.mark.parametrize("base,riskier", [
    ("https://example.com", "https://example.com/login"),
    ("https://example.com/login", "http://example.com/login"),
    ("http://example.com/login", "http://user@example.com/login"),
    ("https://example.com", "https://example.xyz"),
])
def test_extra_signal_never_raises_score(base, riskier):
    assert scan_url(riskier).score <= scan_url(base).score


def test_scan_appends_to_injected_store():
    store = ScanRecordStore()
    first = scan_url("https://google.com", store=store)
    second = scan_url("http://paypa1.com/login", store=store)
    assert store.all() == (second, first)


def test_invalid_results_are_recorded_too():
    store = ScanRecordStore()
    scan_url("http://exa mple.com", store=store)
    assert store.all()[0].category is Category.INVALID


def test_fully_qualified_ip_host_is_still_an_ip():
    r = scan_url("http://1.2.3.4.")
    assert [f.kind for f in r.factors] == ['ip_host', 'insecure_scheme']
    assert r.score == 50


def test_empty_host_label_is_invalid():
    assert scan_url("http://.com").category is Category.INVALID
