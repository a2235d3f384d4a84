"""
Database setup
Async SQLAlchemy engine, session factory and ORM tables
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from config.settings import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    full_name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True, nullable=False)
    phone = Column(String(32))
    location = Column(String(300))
    city = Column(String(120))
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)


class HealthAssessment(Base):
    __tablename__ = "health_assessments"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200))
    age = Column(Integer)
    symptoms = Column(JSON, default=list)
    chronic_diseases = Column(JSON, default=list)  # [{"name": ..., "severity": ...}]
    created_at = Column(DateTime, default=_utcnow, index=True)


class Alert(Base):
    __tablename__ = "alerts"
    __table_args__ = (UniqueConstraint("user_id", "timestamp", name="uq_alert_user_timestamp"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    location = Column(String(300), nullable=False)
    aqi_value = Column(Float, nullable=False)
    pollutants = Column(JSON, default=dict)
    timestamp = Column(DateTime, nullable=False)
    sms_sent = Column(Boolean, default=False, nullable=False)
    sms_sent_at = Column(DateTime)
    created_at = Column(DateTime, default=_utcnow)


class Database:
    """Owns the async engine and hands out sessions"""

    def __init__(self, url: str = None, **engine_kwargs):
        self.url = url or settings.DATABASE_URL
        self._engine = create_async_engine(self.url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )

    async def initialize(self):
        """Create tables if they don't exist"""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized")

    def session(self) -> AsyncSession:
        return self._session_factory()

    async def dispose(self):
        await self._engine.dispose()
