"""
Tests for the SQLAlchemy-backed stores
"""

from datetime import datetime, timedelta

import pytest

from api.schemas import AlertRecord
from data.database import Alert, Database, HealthAssessment, User
from data.stores import AlertStore, HealthProfileStore, UserDirectory
from utils.errors import PersistenceError

SLOT = datetime(2026, 10, 19, 14, 0)
POLLUTANTS = {"PM2_5": 40, "PM10": 60, "CO": 300, "NO2": 21, "SO2": 5, "O3": 30}


async def add_rows(database, *rows):
    async with database.session() as session:
        session.add_all(rows)
        await session.commit()


class TestUserDirectory:

    async def test_only_users_with_phone_and_location(self, database):
        created = datetime(2026, 10, 1)
        await add_rows(
            database,
            User(id="u1", full_name="Asha Rao", email="asha@example.com", phone=" 9876543210 ",
                 location="Delhi", created_at=created),
            User(id="u2", full_name="No Phone", email="np@example.com", phone=None,
                 location="Pune", created_at=created + timedelta(minutes=1)),
            User(id="u3", full_name="Blank Location", email="bl@example.com", phone="9000000000",
                 location="   ", created_at=created + timedelta(minutes=2)),
            User(id="u4", full_name="Ravi Kumar", email="ravi@example.com", phone="9123456780",
                 location="Pune, Maharashtra", created_at=created + timedelta(minutes=3)),
        )

        users = await UserDirectory(database).find_alert_recipients()

        assert [u.id for u in users] == ["u1", "u4"]
        assert users[0].phone == "9876543210"
        assert users[1].location == "Pune, Maharashtra"


class TestHealthProfileStore:

    async def test_latest_assessment_wins(self, database):
        await add_rows(
            database,
            User(id="u1", full_name="Asha Rao", email="asha@example.com", phone="1", location="Delhi"),
            HealthAssessment(user_id="u1", age=40, symptoms=["Headache"], chronic_diseases=[],
                             created_at=datetime(2026, 9, 1)),
            HealthAssessment(user_id="u1", age=45, symptoms=["Cough", 7],
                             chronic_diseases=[{"name": "Asthma", "severity": "Severe"}, "Hypertension", {}],
                             created_at=datetime(2026, 10, 1)),
        )

        profile = await HealthProfileStore(database).latest_for_user("u1")

        assert profile.age == 45
        assert profile.symptoms == ["Cough"]
        assert profile.condition_names == ["Asthma", "Hypertension"]
        assert profile.chronic_conditions[0].severity == "Severe"

    async def test_missing_assessment(self, database):
        assert await HealthProfileStore(database).latest_for_user("nobody") is None

    async def test_missing_age_defaults(self, database):
        await add_rows(database, HealthAssessment(user_id="u1", age=None, symptoms=None, chronic_diseases=None))

        profile = await HealthProfileStore(database).latest_for_user("u1")

        assert profile.age == 30
        assert profile.symptoms == []
        assert profile.chronic_conditions == []


class TestAlertStore:

    async def test_record_then_mark_sent(self, database):
        store = AlertStore(database)

        alert_id, already_sent = await store.record_attempt("u1", "Delhi", 180, POLLUTANTS, SLOT)
        assert alert_id
        assert already_sent is False

        records = await store.list_for_user("u1")
        assert len(records) == 1
        assert records[0].sms_sent is False
        assert records[0].sms_sent_at is None
        assert records[0].pollutants == POLLUTANTS

        assert await store.mark_sent("u1", SLOT, datetime(2026, 10, 19, 11, 2))

        record = (await store.list_for_user("u1"))[0]
        assert record.sms_sent is True
        assert record.sms_sent_at == datetime(2026, 10, 19, 11, 2)
        assert record.aqi_value == 180

    async def test_same_slot_is_reused(self, database):
        store = AlertStore(database)

        first_id, _ = await store.record_attempt("u1", "Delhi", 180, POLLUTANTS, SLOT)
        second_id, already_sent = await store.record_attempt("u1", "Delhi", 185, POLLUTANTS, SLOT)
        assert second_id == first_id
        assert already_sent is False

        await store.mark_sent("u1", SLOT)
        _, already_sent = await store.record_attempt("u1", "Delhi", 180, POLLUTANTS, SLOT)
        assert already_sent is True
        assert len(await store.list_for_user("u1")) == 1

    def test_record_schema_reads_orm_rows(self):
        row = Alert(id="a1", user_id="u1", location="Delhi", aqi_value=180, pollutants=POLLUTANTS,
                    timestamp=SLOT, sms_sent=False)

        record = AlertRecord.model_validate(row)

        assert AlertRecord.model_config["from_attributes"] is True
        assert record.id == "a1"
        assert record.sms_sent_at is None

    async def test_mark_sent_without_record(self, database):
        assert await AlertStore(database).mark_sent("u1", SLOT) is False

    async def test_list_is_newest_first_and_limited(self, database):
        store = AlertStore(database)
        for hour in range(5):
            await store.record_attempt("u1", "Delhi", 100 + hour, POLLUTANTS, SLOT + timedelta(hours=hour))
        await store.record_attempt("u2", "Pune", 150, POLLUTANTS, SLOT)

        records = await store.list_for_user("u1", limit=3)

        assert [r.aqi_value for r in records] == [104, 103, 102]
        assert all(r.user_id == "u1" for r in records)

    @pytest.mark.parametrize("method,args", [
        ("record_attempt", ("u1", "Delhi", 180, POLLUTANTS, SLOT)),
        ("mark_sent", ("u1", SLOT)),
        ("list_for_user", ("u1",)),
    ])
    async def test_database_errors_are_wrapped(self, tmp_path, method, args):
        # tables never created
        broken = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        with pytest.raises(PersistenceError):
            await getattr(AlertStore(broken), method)(*args)
        await broken.dispose()
