from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..models.appointment import AppointmentStatus

# Request bodies. Field aliases follow the JSON names the web clients send.

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class AdminLoginRequest(BaseModel):
    # Compared verbatim against ADMIN_EMAIL, so no address normalization
    email: str
    password: str

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8)

class DoctorCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8)
    speciality: str
    degree: Optional[str] = None
    experience: Optional[str] = None
    about: Optional[str] = None
    fees: float = Field(ge=0)
    address: Optional[str] = None
    image: Optional[str] = None

class AvailabilityChange(BaseModel):
    doc_id: int = Field(alias="docId")

class AppointmentAction(BaseModel):
    appointment_id: int = Field(alias="appointmentId")

# Responses

class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    image: Optional[str] = None
    speciality: str
    degree: Optional[str] = None
    experience: Optional[str] = None
    about: Optional[str] = None
    fees: float
    address: Optional[str] = None
    available: bool

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    image: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[str] = None

class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    doctor_id: int
    slot_date: str
    slot_time: str
    amount: float
    status: AppointmentStatus
    created_at: Optional[datetime] = None
