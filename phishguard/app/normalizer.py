"""
normalizer.py

Turns a raw, user-supplied string into a NormalizedURL.

Bare input gets an http:// prefix rather than https:// so that a URL typed
without a scheme does not pass the insecure-scheme check for free.
"""

import ipaddress
import re
from urllib.parse import urlsplit

from ..errors import EmptyInput, MissingDot, ParseError
from ..models import NormalizedURL, Scheme

DEFAULT_SCHEME = "http://"
_SCHEME_RE = re.compile(r'^https?://', re.IGNORECASE)

# characters that may not appear in a parsed hostname
FORBIDDEN_HOST_CHARS = set(' \t\n\r#%/:<>?@[\\]^|')


def precheck(raw: str) -> str:
    """Caller-level validation: trim, reject empty input and input without a dot."""
    text = (raw or "").strip()
    if not text:
        raise EmptyInput("empty url")
    if "." not in text:
        raise MissingDot(f"no '.' in {text!r}")
    return text


def _ensure_scheme(url: str) -> str:
    if not _SCHEME_RE.match(url):
        return DEFAULT_SCHEME + url
    return url


def _clean_host(hostname: str) -> str:
    host = hostname.lower()
    if ":" in host:
        # only a bracketed IPv6 literal leaves a colon in .hostname
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            raise ParseError(f"invalid host {hostname!r}")
        return host
    if any(ch in FORBIDDEN_HOST_CHARS or ord(ch) < 0x20 or ord(ch) == 0x7f for ch in host):
        raise ParseError(f"illegal character in host {hostname!r}")
    # fully qualified form: example.com. is example.com
    if host.endswith("."):
        host = host[:-1]
    if not host or "" in host.split("."):
        raise ParseError(f"empty label in host {hostname!r}")
    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as e:
            raise ParseError(f"cannot encode host {hostname!r}: {e}")
    return host


def normalize_url(raw: str) -> NormalizedURL:
    """
    Parse `raw` into scheme, lowercased host and path.

    Raises ParseError for anything that is not a usable URL (malformed
    authority, illegal host characters, bad port, missing host).
    """
    url = _ensure_scheme(raw)
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # raises ValueError for a non-numeric or out-of-range port
    except ValueError as e:
        raise ParseError(f"malformed url {raw!r}: {e}")

    if not hostname:
        raise ParseError(f"missing host in {raw!r}")

    return NormalizedURL(
        scheme=Scheme.from_string(parts.scheme),
        host=_clean_host(hostname),
        path=parts.path or "/",
        raw=raw,
    )
