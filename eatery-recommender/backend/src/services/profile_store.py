from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Protocol

from loguru import logger
from sqlalchemy import JSON, Column, DateTime, Integer, create_engine, func, select
from sqlalchemy.orm import declarative_base, sessionmaker

from models import StoredProfile, UserProfile

Base = declarative_base()


class ProfileNotFound(LookupError):
    pass


class ProfileStore(Protocol):
    def save(self, doc: Dict[str, Any]) -> int:
        ...

    def latest(self) -> UserProfile:
        ...

    def recent(self, limit: int = 5) -> List[StoredProfile]:
        ...


class InMemoryProfileStore:
    """Process-local store, handy for tests and single-node demos."""

    def __init__(self) -> None:
        self._rows: List[StoredProfile] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def save(self, doc: Dict[str, Any]) -> int:
        with self._lock:
            row = StoredProfile(id=self._next_id, profile=dict(doc), created_at=datetime.now(timezone.utc))
            self._rows.append(row)
            self._next_id += 1
        return row.id

    def latest(self) -> UserProfile:
        with self._lock:
            if not self._rows:
                raise ProfileNotFound("no user profile")
            doc = self._rows[-1].profile
        return UserProfile.from_dict(doc)

    def recent(self, limit: int = 5) -> List[StoredProfile]:
        with self._lock:
            return list(reversed(self._rows[-limit:])) if limit > 0 else []


class ProfileRecord(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


def _decode(value: Any) -> Dict[str, Any]:
    # rows written by older clients hold the profile as a JSON string
    if isinstance(value, (str, bytes)):
        value = json.loads(value)
    return value if isinstance(value, dict) else {}


class SqlProfileStore:
    def __init__(self, database_url: str) -> None:
        self.engine = create_engine(database_url, future=True, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        Base.metadata.create_all(self.engine)

    def save(self, doc: Dict[str, Any]) -> int:
        with self.SessionLocal() as session:
            record = ProfileRecord(profile=dict(doc))
            session.add(record)
            session.commit()
            logger.info("profile saved id={}", record.id)
            return record.id

    def latest(self) -> UserProfile:
        with self.SessionLocal() as session:
            record = session.execute(
                select(ProfileRecord).order_by(ProfileRecord.id.desc()).limit(1)
            ).scalar_one_or_none()
        if record is None:
            raise ProfileNotFound("no user profile")
        return UserProfile.from_dict(_decode(record.profile))

    def recent(self, limit: int = 5) -> List[StoredProfile]:
        with self.SessionLocal() as session:
            records = session.execute(
                select(ProfileRecord).order_by(ProfileRecord.id.desc()).limit(limit)
            ).scalars().all()
        return [StoredProfile(id=r.id, profile=_decode(r.profile), created_at=r.created_at) for r in records]
