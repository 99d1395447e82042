# store.py
"""
Bounded scan history.

ScanRecordStore keeps the last `capacity` results, most recent first. When a
persistence backend is attached the store is rebuilt from it on construction
and the whole bounded list is written back after every append.
"""

import json
import logging
import os
import tempfile
import threading
import time
from collections import deque
from typing import Any, Dict, List, Optional, Tuple

from . import config
from .models import Category, DerivedStats, ScanResult

logger = logging.getLogger("store")


class MemoryBackend:
    """Keeps the serialized records in memory."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None):
        self.records = list(records or [])

    def load(self) -> List[Dict[str, Any]]:
        return list(self.records)

    def save(self, records: List[Dict[str, Any]]) -> None:
        self.records = list(records)


class JsonFileBackend:
    """Stores the record list as one JSON document: {"updated_at": ..., "records": [...]}."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as fh:
            text = fh.read()
        if not text.strip():
            return []
        data = json.loads(text)
        records = data.get("records", []) if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise ValueError(f"unexpected history layout in {self.path}")
        return records

    def save(self, records: List[Dict[str, Any]]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump({"updated_at": int(time.time()), "records": records}, fh)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise


def breakdown(results) -> Dict[Category, int]:
    counts = {c: 0 for c in Category}
    for r in results:
        counts[r.category] += 1
    return counts


class ScanRecordStore:
    """Append/evict-only log of ScanResult, newest first."""

    def __init__(self, capacity: int = config.HISTORY_CAPACITY, backend=None):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self.backend = backend
        self._records = deque(maxlen=capacity)
        self._lock = threading.Lock()
        if backend is not None:
            self._load()

    def _load(self) -> None:
        try:
            raw_records = self.backend.load() or []
        except Exception:
            logger.exception("Failed to load scan history; starting empty")
            return
        loaded = 0
        for item in raw_records[:self.capacity]:
            try:
                self._records.append(ScanResult.from_dict(item))
                loaded += 1
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable history record: %s", e)
        logger.info("Loaded %d scan records", loaded)

    def append(self, result: ScanResult) -> None:
        """Insert at the head; the oldest record drops off once capacity is reached."""
        with self._lock:
            self._records.appendleft(result)
            if self.backend is not None:
                try:
                    self.backend.save([r.to_dict() for r in self._records])
                except Exception:
                    logger.exception("Failed to persist scan history")

    def all(self) -> Tuple[ScanResult, ...]:
        with self._lock:
            return tuple(self._records)

    def recent_window(self, n: int) -> Tuple[ScanResult, ...]:
        records = self.all()
        return records[:max(0, min(n, len(records)))]

    def recent_breakdown(self, n: int) -> Dict[Category, int]:
        return breakdown(self.recent_window(n))

    def stats(self, window: int = config.RECENT_WINDOW) -> DerivedStats:
        records = self.all()
        totals = breakdown(records)
        return DerivedStats(
            total_scans=len(records),
            total_safe=totals[Category.SAFE],
            total_suspicious=totals[Category.SUSPICIOUS],
            total_phishing=totals[Category.PHISHING],
            total_invalid=totals[Category.INVALID],
            window=max(0, min(window, len(records))),
            recent_breakdown=breakdown(records[:max(0, window)]),
        )

    def __len__(self) -> int:
        return len(self._records)


def build_store(backend: Optional[str] = None, path: Optional[str] = None,
                database_url: Optional[str] = None) -> ScanRecordStore:
    """Create a store with the configured persistence backend (json, sqlite or memory)."""
    backend = (backend or config.STORE_BACKEND).lower()
    if backend == "json":
        return ScanRecordStore(backend=JsonFileBackend(path or config.HISTORY_FILE))
    if backend == "sqlite":
        from .db import SQLAlchemyBackend
        return ScanRecordStore(backend=SQLAlchemyBackend(database_url or config.DATABASE_URL))
    if backend == "memory":
        return ScanRecordStore(backend=MemoryBackend())
    raise ValueError(f"unknown store backend {backend!r}")
