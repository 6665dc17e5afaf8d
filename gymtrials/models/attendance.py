from sqlalchemy import Column, Integer, ForeignKey, DateTime, Date, Time, Enum, UniqueConstraint, Index
from datetime import datetime
import enum

from gymtrials.db.base_class import Base


class PersonType(str, enum.Enum):
    MEMBER = "member"
    TRAINER = "trainer"


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class AttendanceRecord(Base):
    """
    Asistencia diaria de un miembro o entrenador.
    Un único registro por persona y día (upsert sobre la restricción única).
    """
    __tablename__ = "attendance_records"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False)
    person_type = Column(
        Enum(PersonType, values_callable=_enum_values, native_enum=False, length=10),
        nullable=False,
    )
    person_id = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    status = Column(
        Enum(AttendanceStatus, values_callable=_enum_values, native_enum=False, length=10),
        nullable=False,
    )
    check_in_time = Column(Time, nullable=True)
    check_out_time = Column(Time, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint('gym_id', 'person_type', 'person_id', 'date', name='uq_attendance_person_day'),
        Index('ix_attendance_gym_date', 'gym_id', 'date'),
    )
