from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field

from gymtrials.models.trial import TrialHistoryStatus


class UserCreate(BaseModel):
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    total_trials: Optional[int] = Field(None, ge=0, description="Cupo mensual; por defecto TRIAL_DEFAULT_TOTAL")


class User(BaseModel):
    id: int
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TrialUsage(BaseModel):
    """Uso del cupo de pruebas con el reinicio mensual ya aplicado."""
    total_trials: int
    used_trials: int
    remaining_trials: int
    last_reset_date: Optional[datetime] = None
    next_reset_date: Optional[date] = None


class TrialHistoryEntry(BaseModel):
    id: int
    booking_id: int
    gym_id: int
    gym_name: Optional[str] = None
    booking_date: datetime
    trial_date: date
    status: TrialHistoryStatus

    class Config:
        from_attributes = True


class UserTrialStatus(TrialUsage):
    history: List[TrialHistoryEntry] = []
