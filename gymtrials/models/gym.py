from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime

from gymtrials.db.base_class import Base


class Gym(Base):
    """
    Modelo para representar un gimnasio (tenant) en el sistema.
    Cada gimnasio tiene sus propios miembros, entrenadores, reservas y asistencia.
    """
    __tablename__ = "gyms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)
    timezone = Column(String(50), nullable=False, default='UTC')  # Zona horaria del gimnasio (ej: 'America/Mexico_City')
    # Días mínimos entre dos pruebas del mismo usuario (None = valor global)
    trial_retry_spacing_days = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relaciones
    members = relationship("Member", back_populates="gym", cascade="all, delete-orphan")
    trainers = relationship("Trainer", back_populates="gym", cascade="all, delete-orphan")
    trial_bookings = relationship("TrialBooking", back_populates="gym")

    def __repr__(self):
        return f"<Gym(id={self.id}, name='{self.name}')>"
