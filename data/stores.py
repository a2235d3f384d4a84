"""
Persistence collaborators for the alert pipeline
User directory, latest health profile lookup and alert records
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.schemas import AlertRecord, ChronicCondition, HealthProfile, UserProfile
from data.database import Alert, Database, HealthAssessment, User
from utils.constants import DEFAULT_HEALTH_PROFILE
from utils.errors import PersistenceError

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, db: Database):
        self.db = db

    async def find_alert_recipients(self) -> List[UserProfile]:
        """Users with a non-empty phone and location"""
        query = (
            select(User)
            .where(
                User.phone.isnot(None),
                func.trim(User.phone) != "",
                User.location.isnot(None),
                func.trim(User.location) != "",
            )
            .order_by(User.created_at)
        )
        try:
            async with self.db.session() as session:
                users = (await session.execute(query)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load users: {e}") from e

        return [
            UserProfile(id=u.id, full_name=u.full_name, phone=u.phone.strip(), location=u.location.strip())
            for u in users
        ]


class HealthProfileStore:
    def __init__(self, db: Database):
        self.db = db

    async def latest_for_user(self, user_id: str) -> Optional[HealthProfile]:
        query = (
            select(HealthAssessment)
            .where(HealthAssessment.user_id == user_id)
            .order_by(HealthAssessment.created_at.desc())
            .limit(1)
        )
        try:
            async with self.db.session() as session:
                assessment = (await session.execute(query)).scalars().first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load health assessment for user {user_id}: {e}") from e

        if assessment is None:
            return None

        conditions = []
        for entry in assessment.chronic_diseases or []:
            if isinstance(entry, str):
                conditions.append(ChronicCondition(name=entry))
            elif isinstance(entry, dict) and entry.get("name"):
                conditions.append(ChronicCondition(name=entry["name"], severity=entry.get("severity")))

        return HealthProfile(
            age=assessment.age or DEFAULT_HEALTH_PROFILE["age"],
            symptoms=[s for s in assessment.symptoms or [] if isinstance(s, str)],
            chronic_conditions=conditions,
        )


class AlertStore:
    def __init__(self, db: Database):
        self.db = db

    async def record_attempt(
        self,
        user_id: str,
        location: str,
        aqi: float,
        pollutants: Dict[str, Optional[int]],
        timestamp: datetime,
    ) -> Tuple[str, bool]:
        """
        Create the alert for (user_id, timestamp) with sms_sent=False

        An existing record for the same slot is reused.

        Returns:
            (alert id, whether that slot was already marked sent)
        """
        try:
            async with self.db.session() as session:
                existing = await self._find(session, user_id, timestamp)
                if existing is not None:
                    return existing.id, existing.sms_sent

                alert = Alert(
                    user_id=user_id,
                    location=location,
                    aqi_value=aqi,
                    pollutants=pollutants,
                    timestamp=timestamp,
                    sms_sent=False,
                )
                session.add(alert)
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    existing = await self._find(session, user_id, timestamp)
                    if existing is None:
                        raise
                    return existing.id, existing.sms_sent
                return alert.id, False
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to store alert for user {user_id}: {e}") from e

    async def mark_sent(self, user_id: str, timestamp: datetime, sent_at: datetime = None) -> bool:
        """Mark the (user_id, timestamp) alert as delivered"""
        statement = (
            update(Alert)
            .where(Alert.user_id == user_id, Alert.timestamp == timestamp)
            .values(sms_sent=True, sms_sent_at=sent_at or datetime.now(timezone.utc))
        )
        try:
            async with self.db.session() as session:
                result = await session.execute(statement)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to mark alert sent for user {user_id}: {e}") from e
        return result.rowcount > 0

    async def list_for_user(self, user_id: str, limit: int = 50) -> List[AlertRecord]:
        query = (
            select(Alert)
            .where(Alert.user_id == user_id)
            .order_by(Alert.timestamp.desc())
            .limit(limit)
        )
        try:
            async with self.db.session() as session:
                alerts = (await session.execute(query)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load alerts for user {user_id}: {e}") from e
        return [AlertRecord.model_validate(a) for a in alerts]

    @staticmethod
    async def _find(session, user_id: str, timestamp: datetime) -> Optional[Alert]:
        query = select(Alert).where(Alert.user_id == user_id, Alert.timestamp == timestamp)
        return (await session.execute(query)).scalars().first()
