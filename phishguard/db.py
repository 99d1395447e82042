# db.py
"""
Database backend using SQLAlchemy (SQLite by default).
Holds the bounded scan history for ScanRecordStore: one row per record,
ordered by position (0 = most recent).
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import create_engine, Column, Integer, Text, DateTime
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


class ScanRecord(Base):
    __tablename__ = "scan_records"
    id = Column(Integer, primary_key=True)
    position = Column(Integer, index=True, nullable=False)
    url = Column(Text, nullable=False)
    score = Column(Integer, nullable=False)
    category = Column(Text, nullable=False)
    factors_json = Column(Text)  # list of {kind, weight, description}
    scanned_at = Column(DateTime, nullable=False)


def _decode_factors(text):
    # a row that fails to decode keeps its raw text; the store skips that record
    try:
        return json.loads(text or "[]")
    except ValueError:
        return text


class SQLAlchemyBackend:
    def __init__(self, database_url: str):
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine = create_engine(database_url, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.init_db()

    def init_db(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def load(self) -> List[Dict[str, Any]]:
        session = self.SessionLocal()
        try:
            rows = session.query(ScanRecord).order_by(ScanRecord.position.asc()).all()
        finally:
            session.close()
        result = []
        for r in rows:
            scanned_at = r.scanned_at
            if scanned_at.tzinfo is None:
                scanned_at = scanned_at.replace(tzinfo=timezone.utc)
            result.append({
                "url": r.url,
                "score": r.score,
                "category": r.category,
                "timestamp": scanned_at.isoformat(),
                "factors": _decode_factors(r.factors_json),
            })
        return result

    def save(self, records: List[Dict[str, Any]]) -> None:
        """Replace the stored history with `records` in a single transaction."""
        session = self.SessionLocal()
        try:
            session.query(ScanRecord).delete()
            for position, rec in enumerate(records):
                scanned_at = datetime.fromisoformat(rec["timestamp"]).astimezone(timezone.utc)
                session.add(ScanRecord(
                    position=position,
                    url=rec["url"],
                    score=rec["score"],
                    category=rec["category"],
                    factors_json=json.dumps(rec.get("factors", [])),
                    scanned_at=scanned_at.replace(tzinfo=None),
                ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
