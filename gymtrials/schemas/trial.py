from typing import Any, Dict, List, Optional
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from gymtrials.models.trial import SessionType, BookingStatus
from gymtrials.schemas.user import TrialUsage


class TrialBookingCreate(BaseModel):
    """Formulario de reserva. Todos los campos sin valor por defecto son obligatorios."""
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=30)
    gym_id: int = Field(..., gt=0)
    session_type: SessionType
    preferred_date: date
    preferred_time: str = Field(..., min_length=1, max_length=20)
    emergency_contact: Optional[str] = Field(None, max_length=255)
    health_conditions: Optional[str] = None
    fitness_goals: Optional[str] = None
    previous_experience: Optional[str] = None

    @field_validator("name", "phone", "preferred_time")
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("El campo es obligatorio")
        return v


class TrialBooking(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    gym_id: int
    user_id: Optional[int] = None
    session_type: SessionType
    preferred_date: date
    preferred_time: str
    status: BookingStatus
    emergency_contact: Optional[str] = None
    health_conditions: Optional[str] = None
    fitness_goals: Optional[str] = None
    previous_experience: Optional[str] = None
    admin_notes: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TrialBookingStatusUpdate(BaseModel):
    # str para poder responder con el mensaje de estado inválido del servicio
    status: str
    admin_notes: Optional[str] = None


class TrialBookingList(BaseModel):
    bookings: List[TrialBooking]
    total: int
    total_pages: int
    current_page: int


class TrialEligibility(BaseModel):
    can_book: bool
    message: str
    restrictions: Optional[Dict[str, Any]] = None


class TrialHistoryPage(BaseModel):
    trial_limits: TrialUsage
    bookings: List[TrialBooking]
    total: int
    total_pages: int
    current_page: int
