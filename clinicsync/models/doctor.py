from sqlalchemy import Column, Integer, String, DateTime, Boolean, Float, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Profile
    name = Column(String(200), nullable=False)
    image = Column(String(500), nullable=True)
    speciality = Column(String(100), nullable=False)
    degree = Column(String(100), nullable=True)
    experience = Column(String(50), nullable=True)
    about = Column(Text, nullable=True)
    fees = Column(Float, nullable=False, default=0.0)
    address = Column(String(255), nullable=True)

    # Availability
    available = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    appointments = relationship("Appointment", back_populates="doctor")

    def __repr__(self):
        return f"<Doctor(id={self.id}, name='{self.name}', speciality='{self.speciality}')>"
