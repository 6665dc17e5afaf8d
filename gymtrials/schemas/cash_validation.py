from typing import Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field

from gymtrials.models.cash_validation import CashValidationStatus


class CashValidationCreate(BaseModel):
    member_name: str = Field(..., min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    plan_name: str = Field(..., min_length=1, max_length=100)
    duration_months: int = Field(1, ge=1, le=36)
    amount: Decimal = Field(..., gt=0)


class CashValidation(BaseModel):
    id: int
    validation_code: str
    gym_id: int
    member_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    plan_name: str
    duration_months: int
    amount: Decimal
    status: CashValidationStatus
    member_id: Optional[int] = None
    created_at: datetime
    expires_at: datetime
    resolved_at: Optional[datetime] = None
    time_left: int = 0

    class Config:
        from_attributes = True
