from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import require_doctor
from ...services.clinic_service import ClinicService
from ...schemas.clinic import LoginRequest, AppointmentAction

router = APIRouter(prefix="/doctor", tags=["Doctor"])

@router.get("/list")
async def doctor_list(db: Session = Depends(get_db)):
    """Public doctor directory."""
    return {"success": True, "doctors": ClinicService(db).list_doctors()}

@router.post("/login")
async def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    token = ClinicService(db).doctor_login(login_data.email, login_data.password)
    return {"success": True, "token": token}

@router.get("/appointments")
async def appointments(
    doctor_id: int = Depends(require_doctor),
    db: Session = Depends(get_db)
):
    return {
        "success": True,
        "appointments": ClinicService(db).list_appointments(doctor_id=doctor_id)
    }

@router.post("/complete-appointment")
async def complete_appointment(
    action: AppointmentAction,
    doctor_id: int = Depends(require_doctor),
    db: Session = Depends(get_db)
):
    ClinicService(db).complete_appointment(action.appointment_id, doctor_id)
    return {"success": True, "message": "Appointment Completed"}

@router.post("/cancel-appointment")
async def cancel_appointment(
    action: AppointmentAction,
    doctor_id: int = Depends(require_doctor),
    db: Session = Depends(get_db)
):
    ClinicService(db).cancel_appointment(action.appointment_id, doctor_id)
    return {"success": True, "message": "Appointment Cancelled"}

@router.get("/dashboard")
async def dashboard(
    doctor_id: int = Depends(require_doctor),
    db: Session = Depends(get_db)
):
    return {"success": True, "dashData": ClinicService(db).doctor_dashboard(doctor_id)}

@router.get("/profile")
async def profile(
    doctor_id: int = Depends(require_doctor),
    db: Session = Depends(get_db)
):
    return {"success": True, "profileData": ClinicService(db).doctor_profile(doctor_id)}
