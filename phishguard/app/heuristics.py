"""
heuristics.py

The ten URL risk detectors.

Each detector is a pure function (raw, parsed) -> description or None. The
DETECTORS tuple fixes the evaluation order, which is also the order factors
are reported in. Weights live in SIGNAL_WEIGHTS only.

Example:
    >>> from phishguard.app.heuristics import run_detectors
    >>> from phishguard.app.normalizer import normalize_url
    >>> url = "http://192.168.0.10/account"
    >>> [(f.kind, f.weight) for f in run_detectors(url, normalize_url(url))]
    [('ip_host', 35), ('insecure_scheme', 15), ('sensitive_keyword', 10)]
"""

import re
from collections import namedtuple
from typing import List, Optional

from ..models import NormalizedURL, RiskFactor, Scheme
from .lexical import REFERENCE_DOMAINS, find_typosquat_target, shannon_entropy

# Configuration: thresholds, keyword and TLD lists
MAX_URL_LENGTH = 75
MAX_HOST_ENTROPY = 4.5
MAX_SUBDOMAINS = 3
MAX_HOST_HYPHENS = 3
SENSITIVE_KEYWORDS = (
    'login', 'secure', 'account', 'verify', 'update',
    'banking', 'paypal', 'admin', 'wallet', 'confirm',
)
SUSPICIOUS_TLDS = ('.xyz', '.top', '.club', '.info', '.gq', '.tk', '.cn', '.ru')

SIGNAL_WEIGHTS = {
    'ip_host': 35,
    'insecure_scheme': 15,
    'credential_marker': 25,
    'typosquat': 30,
    'long_url': 10,
    'host_entropy': 15,
    'sensitive_keyword': 10,
    'subdomains': 10,
    'hyphens': 10,
    'suspicious_tld': 10,
}

IPV4_RE = re.compile(r'^\d{1,3}(?:\.\d{1,3}){3}$')

Detector = namedtuple('Detector', ['kind', 'evaluate'])


def _ip_host(raw: str, url: NormalizedURL) -> Optional[str]:
    if IPV4_RE.match(url.host):
        return f"Host is an IP address ({url.host})"
    return None


def _insecure_scheme(raw: str, url: NormalizedURL) -> Optional[str]:
    if url.scheme is Scheme.HTTP:
        return "Connection is not encrypted (HTTP)"
    return None


def _credential_marker(raw: str, url: NormalizedURL) -> Optional[str]:
    if '@' in raw:
        return "URL contains '@' (credentials or redirect trick)"
    return None


def _typosquat(raw: str, url: NormalizedURL) -> Optional[str]:
    target = find_typosquat_target(url.host, REFERENCE_DOMAINS)
    if target:
        return f"Possible typosquat of {target}"
    return None


def _long_url(raw: str, url: NormalizedURL) -> Optional[str]:
    if len(raw) > MAX_URL_LENGTH:
        return f"URL length {len(raw)} > {MAX_URL_LENGTH}"
    return None


def _host_entropy(raw: str, url: NormalizedURL) -> Optional[str]:
    entropy = shannon_entropy(url.host)
    if entropy > MAX_HOST_ENTROPY:
        return f"Hostname looks random (entropy {entropy:.2f})"
    return None


def _sensitive_keyword(raw: str, url: NormalizedURL) -> Optional[str]:
    text = (url.host + ' ' + url.path).lower()
    for kw in SENSITIVE_KEYWORDS:
        if kw in text:
            return f"Sensitive keyword '{kw}' in URL"
    return None


def _subdomains(raw: str, url: NormalizedURL) -> Optional[str]:
    depth = len(url.host.split('.')) - 2
    if depth > MAX_SUBDOMAINS:
        return f"{depth} subdomain levels (>{MAX_SUBDOMAINS})"
    return None


def _hyphens(raw: str, url: NormalizedURL) -> Optional[str]:
    count = url.host.count('-')
    if count > MAX_HOST_HYPHENS:
        return f"{count} hyphens in hostname (>{MAX_HOST_HYPHENS})"
    return None


def _suspicious_tld(raw: str, url: NormalizedURL) -> Optional[str]:
    for tld in SUSPICIOUS_TLDS:
        if url.host.endswith(tld):
            return f"Frequently abused TLD: {tld}"
    return None


DETECTORS = (
    Detector('ip_host', _ip_host),
    Detector('insecure_scheme', _insecure_scheme),
    Detector('credential_marker', _credential_marker),
    Detector('typosquat', _typosquat),
    Detector('long_url', _long_url),
    Detector('host_entropy', _host_entropy),
    Detector('sensitive_keyword', _sensitive_keyword),
    Detector('subdomains', _subdomains),
    Detector('hyphens', _hyphens),
    Detector('suspicious_tld', _suspicious_tld),
)


def evaluate(detector: Detector, raw: str, url: NormalizedURL) -> Optional[RiskFactor]:
    description = detector.evaluate(raw, url)
    if description is None:
        return None
    return RiskFactor(weight=SIGNAL_WEIGHTS[detector.kind], description=description, kind=detector.kind)


def run_detectors(raw: str, url: NormalizedURL) -> List[RiskFactor]:
    """Run every detector in registry order; return the factors that fired."""
    factors = []
    for detector in DETECTORS:
        factor = evaluate(detector, raw, url)
        if factor is not None:
            factors.append(factor)
    return factors
