from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session

from gymtrials.repositories.base import BaseRepository
from gymtrials.models.attendance import AttendanceRecord, PersonType
from gymtrials.schemas.attendance import AttendanceMark


class AttendanceRepository(BaseRepository[AttendanceRecord, AttendanceMark, AttendanceMark]):
    def get_for_person_day(
        self, db: Session, *, gym_id: int, person_type: PersonType, person_id: int, day: date
    ) -> Optional[AttendanceRecord]:
        return db.query(AttendanceRecord).filter(
            AttendanceRecord.gym_id == gym_id,
            AttendanceRecord.person_type == person_type,
            AttendanceRecord.person_id == person_id,
            AttendanceRecord.date == day
        ).first()

    def get_by_date(self, db: Session, *, gym_id: int, day: date) -> List[AttendanceRecord]:
        return db.query(AttendanceRecord).filter(
            AttendanceRecord.gym_id == gym_id,
            AttendanceRecord.date == day
        ).all()

    def get_range(
        self,
        db: Session,
        *,
        gym_id: int,
        start: date,
        end: date,
        person_type: Optional[PersonType] = None,
        person_id: Optional[int] = None
    ) -> List[AttendanceRecord]:
        """Registros entre start y end (ambos incluidos), ordenados por fecha."""
        query = db.query(AttendanceRecord).filter(
            AttendanceRecord.gym_id == gym_id,
            AttendanceRecord.date >= start,
            AttendanceRecord.date <= end
        )
        if person_type is not None:
            query = query.filter(AttendanceRecord.person_type == person_type)
        if person_id is not None:
            query = query.filter(AttendanceRecord.person_id == person_id)
        return query.order_by(AttendanceRecord.date).all()

    def delete_before(self, db: Session, *, gym_id: int, before: date) -> int:
        """Borrado masivo de histórico. Único camino de borrado de asistencia."""
        result = db.query(AttendanceRecord).filter(
            AttendanceRecord.gym_id == gym_id,
            AttendanceRecord.date < before
        ).delete(synchronize_session=False)
        db.commit()
        return result


attendance_repository = AttendanceRepository(AttendanceRecord)
