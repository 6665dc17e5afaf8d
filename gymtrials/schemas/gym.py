from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
import pytz


class GymBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del gimnasio")
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=255)
    timezone: str = Field("UTC", description="Zona horaria IANA del gimnasio")
    trial_retry_spacing_days: Optional[int] = Field(
        None, ge=0, description="Días mínimos entre pruebas del mismo usuario (None = valor global)"
    )

    @field_validator("timezone")
    def validate_timezone(cls, v: str) -> str:
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Zona horaria desconocida: {v}")
        return v


class GymCreate(GymBase):
    pass


class GymSchema(GymBase):
    id: int
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
