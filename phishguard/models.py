# models.py
"""
Value types shared by the engine, the history store and the API.

ScanResult.to_dict() / ScanResult.from_dict() define the persisted record
layout: url, score, category, timestamp (ISO-8601 UTC) and factors.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Tuple


class Scheme(Enum):
    HTTP = "http"
    HTTPS = "https"
    OTHER = "other"

    @classmethod
    def from_string(cls, value: str) -> "Scheme":
        value = (value or "").lower()
        if value == "http":
            return cls.HTTP
        if value == "https":
            return cls.HTTPS
        return cls.OTHER


class Category(Enum):
    SAFE = "Safe"
    SUSPICIOUS = "Suspicious"
    PHISHING = "Phishing"
    INVALID = "Invalid"


@dataclass(frozen=True)
class NormalizedURL:
    scheme: Scheme
    host: str
    path: str
    raw: str


@dataclass(frozen=True)
class RiskFactor:
    """A weighted reason a URL looks suspicious.

    Weight 0 is reserved for informational factors ("No obvious threats
    detected", "Invalid URL Format") that never affect the score.
    """
    weight: int
    description: str
    kind: str = ""

    def __post_init__(self):
        if self.weight < 0:
            raise ValueError(f"risk factor weight must be >= 0, got {self.weight}")

    @classmethod
    def informational(cls, description: str) -> "RiskFactor":
        return cls(weight=0, description=description, kind="info")

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "weight": self.weight, "description": self.description}

    @classmethod
    def from_dict(cls, data: Any) -> "RiskFactor":
        # older records may only carry the description text
        if isinstance(data, str):
            return cls(weight=0, description=data)
        if not isinstance(data, dict):
            raise TypeError(f"unreadable risk factor {data!r}")
        return cls(
            weight=int(data.get("weight", 0)),
            description=str(data.get("description", "")),
            kind=str(data.get("kind", "")),
        )


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        ts = value
    else:
        ts = datetime.fromisoformat(str(value))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class ScanResult:
    url: str
    score: int
    category: Category
    factors: Tuple[RiskFactor, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def descriptions(self) -> Tuple[str, ...]:
        return tuple(f.description for f in self.factors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "score": self.score,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "factors": [f.to_dict() for f in self.factors],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanResult":
        if not isinstance(data, dict):
            raise TypeError(f"unreadable scan record {data!r}")
        factors = data.get("factors") or []
        if not isinstance(factors, list):
            raise TypeError(f"factors must be a list, got {type(factors).__name__}")
        return cls(
            url=str(data["url"]),
            score=int(data["score"]),
            category=Category(data["category"]),
            factors=tuple(RiskFactor.from_dict(f) for f in factors),
            timestamp=_parse_timestamp(data["timestamp"]),
        )


@dataclass(frozen=True)
class DerivedStats:
    """Aggregate counts over the history; computed on demand, never stored."""
    total_scans: int = 0
    total_safe: int = 0
    total_suspicious: int = 0
    total_phishing: int = 0
    total_invalid: int = 0
    window: int = 0
    recent_breakdown: Dict[Category, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_scans": self.total_scans,
            "total_safe": self.total_safe,
            "total_suspicious": self.total_suspicious,
            "total_phishing": self.total_phishing,
            "total_invalid": self.total_invalid,
            "recent": {
                "window": self.window,
                "breakdown": {c.value: n for c, n in self.recent_breakdown.items()},
            },
        }
