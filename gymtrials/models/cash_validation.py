from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey, Enum
from datetime import datetime
import enum

from gymtrials.db.base_class import Base


class CashValidationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    EXPIRED = "expired"


class CashValidation(Base):
    """
    Solicitud de validación de un pago en efectivo.
    Expira en expires_at; la expiración se aplica al leer y con un barrido periódico.
    """
    __tablename__ = "cash_validations"

    id = Column(Integer, primary_key=True, index=True)
    validation_code = Column(String(12), unique=True, nullable=False, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    member_name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)
    plan_name = Column(String(100), nullable=False)
    duration_months = Column(Integer, nullable=False, default=1)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(CashValidationStatus, values_callable=lambda e: [m.value for m in e], native_enum=False, length=10),
        nullable=False,
        default=CashValidationStatus.PENDING,
        index=True,
    )
    member_id = Column(Integer, ForeignKey("members.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    resolved_at = Column(DateTime, nullable=True)
