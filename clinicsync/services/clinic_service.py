from sqlalchemy.orm import Session
from typing import List, Optional
import logging
import secrets

from ..core.config import settings
from ..core.security import (
    verify_password, get_password_hash, create_admin_token,
    create_role_token, UserRole
)
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..models.user import User
from ..schemas.clinic import (
    DoctorCreate, RegisterRequest, DoctorResponse,
    UserResponse, AppointmentResponse
)

logger = logging.getLogger(__name__)

LATEST_APPOINTMENTS = 5

class ClinicError(Exception):
    """Business-level failure reported to clients as ``success: false``."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

def _doctor_json(doctor: Doctor) -> dict:
    return DoctorResponse.model_validate(doctor).model_dump(mode="json")

def _appointment_json(appointment: Appointment) -> dict:
    return AppointmentResponse.model_validate(appointment).model_dump(mode="json")

class ClinicService:
    def __init__(self, db: Session):
        self.db = db

    # Authentication

    def admin_login(self, email: str, password: str) -> str:
        """Check the single admin account and issue its credential."""
        email_ok = secrets.compare_digest(email.encode(), settings.ADMIN_EMAIL.encode())
        password_ok = secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
        if not (email_ok and password_ok):
            logger.warning("Rejected admin login attempt")
            raise ClinicError("Invalid credentials")
        return create_admin_token()

    def doctor_login(self, email: str, password: str) -> str:
        doctor = self.db.query(Doctor).filter(Doctor.email == email).first()
        if not doctor or not verify_password(password, doctor.password_hash):
            raise ClinicError("Invalid credentials")
        return create_role_token(doctor.id, UserRole.DOCTOR)

    def user_login(self, email: str, password: str) -> str:
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            raise ClinicError("User does not exist")
        if not verify_password(password, user.password_hash):
            raise ClinicError("Invalid credentials")
        return create_role_token(user.id, UserRole.PATIENT)

    def register_user(self, user_data: RegisterRequest) -> str:
        """Create a patient account and return its credential."""
        existing_user = self.db.query(User).filter(
            User.email == user_data.email
        ).first()
        if existing_user:
            raise ClinicError("Email already registered")

        user = User(
            name=user_data.name,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Registered patient {user.id}")
        return create_role_token(user.id, UserRole.PATIENT)

    # Doctors

    def add_doctor(self, doctor_data: DoctorCreate) -> Doctor:
        if self.db.query(Doctor).filter(Doctor.email == doctor_data.email).first():
            raise ClinicError("Email already registered")

        fields = doctor_data.model_dump(exclude={"password"})
        doctor = Doctor(password_hash=get_password_hash(doctor_data.password), **fields)
        self.db.add(doctor)
        self.db.commit()
        self.db.refresh(doctor)

        logger.info(f"Added doctor {doctor.id}")
        return doctor

    def list_doctors(self) -> List[dict]:
        doctors = self.db.query(Doctor).order_by(Doctor.id).all()
        return [_doctor_json(doctor) for doctor in doctors]

    def change_availability(self, doctor_id: int) -> None:
        """Flip a doctor's ``available`` flag."""
        doctor = self._get_doctor(doctor_id)
        doctor.available = not doctor.available
        self.db.commit()
        logger.info(f"Doctor {doctor_id} availability set to {doctor.available}")

    def doctor_profile(self, doctor_id: int) -> dict:
        return _doctor_json(self._get_doctor(doctor_id))

    # Patients

    def user_profile(self, user_id: int) -> dict:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ClinicError("User not found")
        return UserResponse.model_validate(user).model_dump(mode="json")

    # Appointments

    def list_appointments(
        self,
        doctor_id: Optional[int] = None,
        user_id: Optional[int] = None
    ) -> List[dict]:
        """Appointments in booking order, optionally scoped to one account."""
        query = self.db.query(Appointment)
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)
        if user_id is not None:
            query = query.filter(Appointment.user_id == user_id)
        return [_appointment_json(a) for a in query.order_by(Appointment.id).all()]

    def cancel_appointment(self, appointment_id: int, doctor_id: Optional[int] = None) -> None:
        self._transition(appointment_id, AppointmentStatus.CANCELLED, doctor_id)

    def complete_appointment(self, appointment_id: int, doctor_id: int) -> None:
        self._transition(appointment_id, AppointmentStatus.COMPLETED, doctor_id)

    # Dashboards

    def admin_dashboard(self) -> dict:
        appointments = self.db.query(Appointment).order_by(Appointment.id).all()
        return {
            "doctors": self.db.query(Doctor).count(),
            "appointments": len(appointments),
            "patients": self.db.query(User).count(),
            "latestAppointments": self._latest(appointments),
        }

    def doctor_dashboard(self, doctor_id: int) -> dict:
        appointments = (
            self.db.query(Appointment)
            .filter(Appointment.doctor_id == doctor_id)
            .order_by(Appointment.id)
            .all()
        )
        earnings = sum(
            a.amount for a in appointments
            if a.status == AppointmentStatus.COMPLETED
        )
        return {
            "earnings": earnings,
            "appointments": len(appointments),
            "patients": len({a.user_id for a in appointments}),
            "latestAppointments": self._latest(appointments),
        }

    def _latest(self, appointments: List[Appointment]) -> List[dict]:
        return [_appointment_json(a) for a in reversed(appointments[-LATEST_APPOINTMENTS:])]

    def _get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise ClinicError("Doctor not found")
        return doctor

    def _transition(
        self,
        appointment_id: int,
        target: AppointmentStatus,
        doctor_id: Optional[int]
    ) -> None:
        """Move a scheduled appointment to a terminal status."""
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()

        if not appointment:
            raise ClinicError("Appointment not found")

        # Doctors may only touch their own appointments
        if doctor_id is not None and appointment.doctor_id != doctor_id:
            raise ClinicError("Mark Failed")

        if appointment.is_terminal:
            raise ClinicError(f"Appointment already {appointment.status.value}")

        appointment.status = target
        self.db.commit()
        logger.info(f"Appointment {appointment_id} marked {target.value}")
