import os

# Must be set before the application settings are imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite://"

from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from clinicsync.main import app
from clinicsync.core.database import Base, SessionLocal, engine, init_db
from clinicsync.core.security import get_password_hash
from clinicsync.client.credentials import LocalStorage
from clinicsync.client.notifications import RecordingNotificationSink
from clinicsync.client.session import ClientSessions
from clinicsync.models.appointment import Appointment, AppointmentStatus
from clinicsync.models.doctor import Doctor
from clinicsync.models.user import User

DOCTOR_PASSWORD = "doctor-pass-123"
PATIENT_PASSWORD = "patient-pass-123"


class CallRecorder:
    """Gateway middleware remembering every call it sees."""

    def __init__(self):
        self.calls = []

    async def __call__(self, call, call_next):
        self.calls.append((call.method, call.path, dict(call.headers)))
        return await call_next(call)

    @property
    def paths(self):
        return [path for _, path, _ in self.calls]

    def clear(self):
        self.calls.clear()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def test_db():
    # Create tables
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded(test_db):
    """Two doctors, two patients and four appointments in booking order."""
    db = SessionLocal()
    try:
        ada = Doctor(
            name="Dr. Ada Okafor", email="ada@example.com",
            password_hash=get_password_hash(DOCTOR_PASSWORD),
            speciality="General physician", fees=50.0, available=True,
        )
        ben = Doctor(
            name="Dr. Ben Hale", email="ben@example.com",
            password_hash=get_password_hash(DOCTOR_PASSWORD),
            speciality="Dermatologist", fees=60.0, available=False,
        )
        pat = User(
            name="Pat Doe", email="pat@example.com",
            password_hash=get_password_hash(PATIENT_PASSWORD),
        )
        sam = User(
            name="Sam Roe", email="sam@example.com",
            password_hash=get_password_hash(PATIENT_PASSWORD),
        )
        db.add_all([ada, ben, pat, sam])
        db.commit()

        appointments = [
            Appointment(user_id=pat.id, doctor_id=ada.id, slot_date="2026_10_1", slot_time="10:00 AM", amount=50.0),
            Appointment(user_id=pat.id, doctor_id=ben.id, slot_date="2026_10_2", slot_time="11:00 AM", amount=60.0),
            Appointment(user_id=sam.id, doctor_id=ada.id, slot_date="2026_10_3", slot_time="09:30 AM", amount=50.0),
            Appointment(user_id=pat.id, doctor_id=ada.id, slot_date="2026_10_4", slot_time="04:00 PM", amount=50.0,
                        status=AppointmentStatus.COMPLETED),
        ]
        db.add_all(appointments)
        db.commit()

        return SimpleNamespace(
            ada=ada.id, ben=ben.id, pat=pat.id, sam=sam.id,
            appointments=[a.id for a in appointments],
        )
    finally:
        db.close()


@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def recorder():
    return CallRecorder()


@pytest.fixture
def sessions(seeded, sink, recorder, tmp_path):
    """Client sessions wired to the in-process backend."""
    return ClientSessions(
        base_url="http://testserver",
        sink=sink,
        storage=LocalStorage(tmp_path / "storage.json"),
        transport=httpx.ASGITransport(app=app),
        middlewares=(recorder,),
    )


def appointment_status(appointment_id):
    db = SessionLocal()
    try:
        return db.get(Appointment, appointment_id).status
    finally:
        db.close()
