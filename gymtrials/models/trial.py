from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, Text, Enum, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from gymtrials.db.base_class import Base


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class SessionType(str, enum.Enum):
    """Tipos de sesión que se pueden reservar."""
    TRIAL = "trial"
    PERSONAL_TRAINING = "personal_training"
    GROUP_CLASS = "group_class"
    CONSULTATION = "consultation"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class TrialHistoryStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TrialBooking(Base):
    """
    Reserva de una sesión en un gimnasio.
    user_id es None para reservas anónimas (sin usuario autenticado).
    """
    __tablename__ = "trial_bookings"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True)

    # Datos de contacto
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(30), nullable=False)

    session_type = Column(
        Enum(SessionType, values_callable=_enum_values, native_enum=False, length=30),
        nullable=False,
        index=True,
    )
    preferred_date = Column(Date, nullable=False)
    preferred_time = Column(String(20), nullable=False)  # "10:00" o franja "morning"
    status = Column(
        Enum(BookingStatus, values_callable=_enum_values, native_enum=False, length=20),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )

    # Información adicional del formulario
    emergency_contact = Column(String(255), nullable=True)
    health_conditions = Column(Text, nullable=True)
    fitness_goals = Column(Text, nullable=True)
    previous_experience = Column(Text, nullable=True)
    admin_notes = Column(Text, nullable=True)

    cancelled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    gym = relationship("Gym", back_populates="trial_bookings")

    def __repr__(self):
        return f"<TrialBooking(id={self.id}, gym_id={self.gym_id}, status='{self.status}')>"


class TrialHistoryEntry(Base):
    """
    Historial de pruebas de un usuario. Una entrada por cada prueba reservada;
    las cancelaciones se conservan cambiando el estado.

    booking_id no es FK para que el historial sobreviva al borrado de la reserva.
    """
    __tablename__ = "trial_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    booking_id = Column(Integer, nullable=False, unique=True)
    gym_id = Column(Integer, nullable=False)
    gym_name = Column(String(255), nullable=True)
    booking_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    trial_date = Column(Date, nullable=False)
    status = Column(
        Enum(TrialHistoryStatus, values_callable=_enum_values, native_enum=False, length=20),
        nullable=False,
        default=TrialHistoryStatus.SCHEDULED,
    )
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="trial_history")

    __table_args__ = (
        Index('ix_trial_history_user_gym', 'user_id', 'gym_id'),
    )
