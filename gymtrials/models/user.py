from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from gymtrials.db.base_class import Base


class User(Base):
    """
    Usuario final de la plataforma.

    Incluye el registro de uso de pruebas gratuitas. Estas columnas solo las
    modifica el servicio de límites de prueba (trial_limits), siempre con
    actualizaciones atómicas que preservan used_trials + remaining_trials == total_trials.
    """
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # --- Cupo mensual de pruebas ---
    total_trials = Column(Integer, nullable=False, default=3)
    used_trials = Column(Integer, nullable=False, default=0)
    remaining_trials = Column(Integer, nullable=False, default=3)
    trial_last_reset_date = Column(DateTime, nullable=True)

    trial_history = relationship(
        "TrialHistoryEntry",
        back_populates="user",
        order_by="TrialHistoryEntry.booking_date",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint('used_trials >= 0 AND remaining_trials >= 0', name='ck_user_trials_non_negative'),
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
