"""
lexical.py

String measures used by the detectors: Shannon entropy and the same-length
homoglyph/typosquat matcher.

Only equal-length comparisons are made, so typosquats built by inserting or
dropping characters (googgle.com, gogle.com) and multi-character
substitutions (vv for w) are not detected.
"""

import math
from typing import Iterable, Optional

# Well-known registrable domains that are commonly impersonated
REFERENCE_DOMAINS = (
    'google.com', 'facebook.com', 'amazon.com', 'apple.com', 'microsoft.com',
    'paypal.com', 'netflix.com', 'instagram.com', 'twitter.com', 'linkedin.com',
    'yahoo.com', 'github.com', 'dropbox.com', 'ebay.com', 'chase.com',
    'wellsfargo.com', 'bankofamerica.com', 'outlook.com', 'icloud.com',
    'whatsapp.com',
)

# Bidirectional single-character substitutions used to impersonate letters
HOMOGLYPH_PAIRS = (
    ('0', 'o'), ('1', 'l'), ('3', 'e'), ('4', 'a'), ('5', 's'),
    ('7', 't'), ('8', 'b'), ('9', 'g'), ('i', 'l'), ('v', 'u'),
)

_HOMOGLYPHS = frozenset(HOMOGLYPH_PAIRS) | frozenset((b, a) for a, b in HOMOGLYPH_PAIRS)


def shannon_entropy(data: str) -> float:
    """Bits per character of `data` (0.0 for an empty string)."""
    if not data:
        return 0.0
    n = len(data)
    probabilities = [float(data.count(c)) / n for c in set(data)]
    return -sum(p * math.log(p, 2) for p in probabilities)


def is_homoglyph(a: str, b: str) -> bool:
    return (a, b) in _HOMOGLYPHS


def count_mismatches(a: str, b: str) -> int:
    """Positions where two equal-length strings differ, ignoring homoglyph substitutes."""
    if len(a) != len(b):
        raise ValueError("count_mismatches needs equal-length strings")
    return sum(1 for x, y in zip(a, b) if x != y and not is_homoglyph(x, y))


def base_domain(host: str) -> str:
    """Last two dot-separated labels of `host`."""
    return '.'.join(host.split('.')[-2:])


def find_typosquat_target(host: str, references: Iterable[str] = REFERENCE_DOMAINS) -> Optional[str]:
    """
    Return the reference domain that `host` appears to impersonate, or None.

    A reference matches when the host's base domain has the same length,
    differs from it, and has at most one non-homoglyph mismatch. A match is
    withdrawn when the full host contains the reference itself (for example
    accounts.google.com) and scanning moves on to the next reference.
    """
    base = base_domain(host)
    for ref in references:
        if len(base) != len(ref) or base == ref:
            continue
        if count_mismatches(base, ref) > 1:
            continue
        if ref in host:
            continue
        return ref
    return None
