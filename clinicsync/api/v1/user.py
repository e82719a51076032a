from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import require_patient
from ...services.clinic_service import ClinicService
from ...schemas.clinic import LoginRequest, RegisterRequest

router = APIRouter(prefix="/user", tags=["Patient"])

@router.post("/register")
async def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Create a patient account and log it in."""
    token = ClinicService(db).register_user(user_data)
    return {"success": True, "token": token}

@router.post("/login")
async def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    token = ClinicService(db).user_login(login_data.email, login_data.password)
    return {"success": True, "token": token}

@router.get("/get-profile")
async def get_profile(
    user_id: int = Depends(require_patient),
    db: Session = Depends(get_db)
):
    return {"success": True, "userData": ClinicService(db).user_profile(user_id)}

@router.get("/appointments")
async def appointments(
    user_id: int = Depends(require_patient),
    db: Session = Depends(get_db)
):
    return {
        "success": True,
        "appointments": ClinicService(db).list_appointments(user_id=user_id)
    }
