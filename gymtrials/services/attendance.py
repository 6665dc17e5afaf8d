from typing import Dict, List, Optional, Union
from datetime import date, timedelta
import logging

from redis.asyncio import Redis
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gymtrials.core.config import get_settings
from gymtrials.core.exceptions import NotFoundError, ValidationError
from gymtrials.core.timezone_utils import get_gym_today
from gymtrials.models.attendance import AttendanceRecord, AttendanceStatus, PersonType
from gymtrials.models.member import Member, Trainer
from gymtrials.repositories.attendance import attendance_repository
from gymtrials.repositories.gym import gym_repository
from gymtrials.repositories.member import member_repository, trainer_repository
from gymtrials.schemas.attendance import (
    AttendanceMark,
    AttendanceRecord as AttendanceRecordSchema,
    AttendanceSummary,
    DailyStats,
    DayAttendance,
    MonthCalendar,
    MonthlyAttendanceStats,
    PersonAttendance,
    StatusCounter,
)
from gymtrials.services.attendance_calendar import build_month_calendar
from gymtrials.services.cache_service import cache_service

logger = logging.getLogger(__name__)

STATS_CACHE_PREFIX = "attendance_stats"


def person_key(person_type: PersonType, person_id: int) -> str:
    return f"{PersonType(person_type).value}_{person_id}"


def _count(counter: StatusCounter, status: AttendanceStatus) -> None:
    counter.total += 1
    if status == AttendanceStatus.PRESENT:
        counter.present += 1
    else:
        counter.absent += 1


class AttendanceService:
    """
    Servicio de asistencia diaria de miembros y entrenadores.
    Un único registro por persona y día: marcar de nuevo sobrescribe.
    """

    def _get_person(
        self, db: Session, gym_id: int, person_type: PersonType, person_id: int
    ) -> Union[Member, Trainer]:
        if person_type == PersonType.MEMBER:
            person = member_repository.get(db, id=person_id, gym_id=gym_id)
            label = "Miembro"
        else:
            person = trainer_repository.get(db, id=person_id, gym_id=gym_id)
            label = "Entrenador"
        if not person:
            raise NotFoundError(f"{label} {person_id} no encontrado en el gimnasio {gym_id}")
        return person

    def _upsert(self, db: Session, gym_id: int, payload: AttendanceMark) -> AttendanceRecord:
        record = attendance_repository.get_for_person_day(
            db,
            gym_id=gym_id,
            person_type=payload.person_type,
            person_id=payload.person_id,
            day=payload.date,
        )
        if record is None:
            record = AttendanceRecord(
                gym_id=gym_id,
                person_type=payload.person_type,
                person_id=payload.person_id,
                date=payload.date,
            )
            db.add(record)
        record.status = payload.status
        record.check_in_time = payload.check_in_time
        record.check_out_time = payload.check_out_time
        db.flush()
        return record

    def mark_attendance(self, db: Session, gym_id: int, payload: AttendanceMark) -> AttendanceRecord:
        """
        Registra o sobrescribe la asistencia de una persona en un día.

        Raises:
            NotFoundError: Si la persona no pertenece al gimnasio
        """
        self._get_person(db, gym_id, payload.person_type, payload.person_id)
        try:
            record = self._upsert(db, gym_id, payload)
            db.commit()
        except IntegrityError:
            # Inserción concurrente del mismo día: repetir como actualización
            db.rollback()
            logger.warning(
                f"Conflicto al marcar asistencia de {person_key(payload.person_type, payload.person_id)} "
                f"el {payload.date}, reintentando como actualización"
            )
            record = self._upsert(db, gym_id, payload)
            db.commit()
        db.refresh(record)
        logger.info(
            f"Asistencia marcada: gym {gym_id}, {person_key(payload.person_type, payload.person_id)}, "
            f"{payload.date} -> {payload.status.value}"
        )
        return record

    def bulk_mark_attendance(self, db: Session, gym_id: int, records: List[AttendanceMark]) -> int:
        """Marca varios registros en una sola transacción. Devuelve cuántos se guardaron."""
        for payload in records:
            self._get_person(db, gym_id, payload.person_type, payload.person_id)
        try:
            for payload in records:
                self._upsert(db, gym_id, payload)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"Conflicto en marcado masivo del gym {gym_id}, reintentando")
            for payload in records:
                self._upsert(db, gym_id, payload)
            db.commit()
        logger.info(f"Marcado masivo: {len(records)} registros en gym {gym_id}")
        return len(records)

    def get_attendance_for_date(self, db: Session, gym_id: int, day: date) -> Dict[str, DayAttendance]:
        records = attendance_repository.get_by_date(db, gym_id=gym_id, day=day)
        return {
            person_key(r.person_type, r.person_id): DayAttendance(
                status=r.status,
                check_in_time=r.check_in_time,
                check_out_time=r.check_out_time,
            )
            for r in records
        }

    def get_attendance_summary(self, db: Session, gym_id: int, start: date, end: date) -> AttendanceSummary:
        """
        Resumen de asistencia entre dos fechas (ambas incluidas).

        Raises:
            ValidationError: Si end es anterior a start
        """
        if end < start:
            raise ValidationError("La fecha final no puede ser anterior a la inicial")

        records = attendance_repository.get_range(db, gym_id=gym_id, start=start, end=end)
        members = {m.id: m for m in member_repository.get_multi(db, gym_id=gym_id, limit=10000)}
        trainers = {t.id: t for t in trainer_repository.get_multi(db, gym_id=gym_id, limit=10000)}

        summary = AttendanceSummary(total_days=(end - start).days + 1)
        for record in records:
            day_key = record.date.isoformat()
            daily = summary.daily_stats.setdefault(day_key, DailyStats())
            key = str(record.person_id)
            if record.person_type == PersonType.MEMBER:
                member = members.get(record.person_id)
                entry = summary.member_attendance.setdefault(key, PersonAttendance(
                    id=record.person_id, name=member.name if member else "Desconocido"
                ))
                _count(daily.members, record.status)
            else:
                trainer = trainers.get(record.person_id)
                entry = summary.trainer_attendance.setdefault(key, PersonAttendance(
                    id=record.person_id, name=trainer.full_name if trainer else "Desconocido"
                ))
                _count(daily.trainers, record.status)
            entry.attendance.append(AttendanceRecordSchema.model_validate(record))
        return summary

    def _compute_monthly_stats(self, db: Session, gym_id: int, month: int, year: int) -> MonthlyAttendanceStats:
        start = date(year, month, 1)
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        records = attendance_repository.get_range(db, gym_id=gym_id, start=start, end=end - timedelta(days=1))

        stats = MonthlyAttendanceStats(
            month=month,
            year=year,
            total_records=len(records),
            member_stats=StatusCounter(),
            trainer_stats=StatusCounter(),
        )
        for record in records:
            daily = stats.daily_trends.setdefault(record.date.isoformat(), DailyStats())
            if record.person_type == PersonType.MEMBER:
                _count(stats.member_stats, record.status)
                _count(daily.members, record.status)
            else:
                _count(stats.trainer_stats, record.status)
                _count(daily.trainers, record.status)
        return stats

    async def get_monthly_stats(
        self, db: Session, gym_id: int, month: int, year: int, redis_client: Optional[Redis] = None
    ) -> MonthlyAttendanceStats:
        """Estadísticas del mes, cacheadas en Redis hasta el siguiente marcado."""
        if not 1 <= month <= 12:
            raise ValidationError(f"Mes inválido: {month}")

        async def db_fetch():
            return self._compute_monthly_stats(db, gym_id, month, year)

        return await cache_service.get_or_set(
            redis_client=redis_client,
            cache_key=f"{STATS_CACHE_PREFIX}:{gym_id}:{year}:{month}",
            db_fetch_func=db_fetch,
            model_class=MonthlyAttendanceStats,
            expiry_seconds=get_settings().CACHE_TTL_ATTENDANCE_STATS,
        )

    async def invalidate_stats_cache(self, redis_client: Optional[Redis], gym_id: int) -> int:
        return await cache_service.delete_pattern(redis_client, f"{STATS_CACHE_PREFIX}:{gym_id}:*")

    def get_person_calendar(
        self,
        db: Session,
        gym_id: int,
        person_type: PersonType,
        person_id: int,
        year: int,
        month: int,
        today: Optional[date] = None
    ) -> MonthCalendar:
        """
        Calendario mensual de una persona reconciliado con su membresía.
        Los entrenadores no tienen fin de membresía.
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Mes inválido: {month}")
        person = self._get_person(db, gym_id, person_type, person_id)
        if today is None:
            gym = gym_repository.get(db, id=gym_id)
            today = get_gym_today(gym.timezone if gym else get_settings().DEFAULT_TIMEZONE)

        valid_until = person.membership_valid_until if person_type == PersonType.MEMBER else None
        start = date(year, month, 1) - timedelta(days=7)
        end = date(year, month, 1) + timedelta(days=42)
        records = attendance_repository.get_range(
            db, gym_id=gym_id, start=start, end=end, person_type=person_type, person_id=person_id
        )

        return build_month_calendar(
            year,
            month,
            records,
            today,
            join_date=person.join_date,
            valid_until=valid_until,
            non_working_weekday=get_settings().ATTENDANCE_NON_WORKING_WEEKDAY,
            person_id=person_id,
            person_type=person_type,
        )

    def cleanup_attendance(self, db: Session, gym_id: int, before: date) -> int:
        deleted = attendance_repository.delete_before(db, gym_id=gym_id, before=before)
        logger.info(f"Eliminados {deleted} registros de asistencia anteriores a {before} en gym {gym_id}")
        return deleted


attendance_service = AttendanceService()
