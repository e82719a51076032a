from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import require_admin
from ...services.clinic_service import ClinicService
from ...schemas.clinic import (
    AdminLoginRequest, DoctorCreate, AvailabilityChange, AppointmentAction
)

router = APIRouter(prefix="/admin", tags=["Admin"])

@router.post("/login")
async def login(login_data: AdminLoginRequest, db: Session = Depends(get_db)):
    """Issue the admin credential."""
    token = ClinicService(db).admin_login(login_data.email, login_data.password)
    return {"success": True, "token": token}

@router.post("/add-doctor", dependencies=[Depends(require_admin)])
async def add_doctor(doctor_data: DoctorCreate, db: Session = Depends(get_db)):
    ClinicService(db).add_doctor(doctor_data)
    return {"success": True, "message": "Doctor Added"}

@router.get("/all-doctors", dependencies=[Depends(require_admin)])
async def all_doctors(db: Session = Depends(get_db)):
    return {"success": True, "doctors": ClinicService(db).list_doctors()}

@router.post("/change-availability", dependencies=[Depends(require_admin)])
async def change_availability(change: AvailabilityChange, db: Session = Depends(get_db)):
    """Toggle a doctor's availability."""
    ClinicService(db).change_availability(change.doc_id)
    return {"success": True, "message": "Availability Changed"}

@router.get("/appointments", dependencies=[Depends(require_admin)])
async def appointments(db: Session = Depends(get_db)):
    return {"success": True, "appointments": ClinicService(db).list_appointments()}

@router.post("/cancel-appointment", dependencies=[Depends(require_admin)])
async def cancel_appointment(action: AppointmentAction, db: Session = Depends(get_db)):
    ClinicService(db).cancel_appointment(action.appointment_id)
    return {"success": True, "message": "Appointment Cancelled"}

@router.get("/dashboard", dependencies=[Depends(require_admin)])
async def dashboard(db: Session = Depends(get_db)):
    return {"success": True, "dashData": ClinicService(db).admin_dashboard()}
