from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, model_validator


class MemberBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    plan_name: Optional[str] = Field(None, max_length=100)
    join_date: Optional[date] = None
    membership_valid_until: Optional[date] = None

    @model_validator(mode="after")
    def check_membership_window(self):
        if self.join_date and self.membership_valid_until and self.membership_valid_until < self.join_date:
            raise ValueError("membership_valid_until no puede ser anterior a join_date")
        return self


class MemberCreate(MemberBase):
    # Permite registrar un miembro aunque exista otro con el mismo email/teléfono
    force: bool = False


class MemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    plan_name: Optional[str] = Field(None, max_length=100)
    join_date: Optional[date] = None
    membership_valid_until: Optional[date] = None


class Member(MemberBase):
    id: int
    gym_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class TrainerCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    specialty: Optional[str] = Field(None, max_length=100)
    join_date: Optional[date] = None


class Trainer(TrainerCreate):
    id: int
    gym_id: int
    created_at: datetime

    class Config:
        from_attributes = True
