"""
Calendario mensual de asistencia de una persona.

Funciones puras: combinan los registros guardados con la ventana de
membresía para clasificar cada día de una cuadrícula de 6 semanas.
No acceden a la base de datos ni a la hora del sistema.
"""

from typing import Any, Dict, Iterable, List, Optional
from datetime import date, timedelta

from gymtrials.models.attendance import AttendanceStatus
from gymtrials.schemas.attendance import (
    CalendarDay,
    DayClassification,
    MonthAttendanceStats,
    MonthCalendar,
)

GRID_DAYS = 42

# Clasificaciones que cuentan como día laborable dentro de la membresía
WORKING_CLASSIFICATIONS = (
    DayClassification.PRESENT,
    DayClassification.ABSENT,
    DayClassification.NOT_MARKED,
)


def grid_start(year: int, month: int) -> date:
    """Domingo en o antes del día 1 del mes."""
    first = date(year, month, 1)
    return first - timedelta(days=(first.weekday() + 1) % 7)


def classify_day(
    day: date,
    *,
    year: int,
    month: int,
    today: date,
    record: Optional[Any] = None,
    join_date: Optional[date] = None,
    valid_until: Optional[date] = None,
    non_working_weekday: int = 6
) -> DayClassification:
    """
    Clasifica un día. El orden de las reglas importa: un domingo con
    registro sigue siendo fin de semana, y hoy no es futuro.
    """
    if (day.year, day.month) != (year, month):
        return DayClassification.OUTSIDE_MONTH
    if (join_date and day < join_date) or (valid_until and day > valid_until):
        return DayClassification.OUTSIDE_MEMBERSHIP
    if day.weekday() == non_working_weekday:
        return DayClassification.WEEKEND
    if day > today:
        return DayClassification.FUTURE
    if record is not None:
        if record.status == AttendanceStatus.PRESENT:
            return DayClassification.PRESENT
        return DayClassification.ABSENT
    return DayClassification.NOT_MARKED


def compute_month_stats(days: Iterable[CalendarDay]) -> MonthAttendanceStats:
    """
    Resumen del mes sobre los días laborables ya transcurridos dentro de la
    membresía. attendance_rate es una fracción; 0.0 si no hay días laborables.
    """
    in_month = [d for d in days if d.in_month and d.status in WORKING_CLASSIFICATIONS]
    present = sum(1 for d in in_month if d.status == DayClassification.PRESENT)
    absent = sum(1 for d in in_month if d.status == DayClassification.ABSENT)
    not_marked = sum(1 for d in in_month if d.status == DayClassification.NOT_MARKED)
    total = len(in_month)
    rate = present / total if total else 0.0
    return MonthAttendanceStats(
        present_count=present,
        absent_count=absent,
        not_marked_count=not_marked,
        total_working_days=total,
        attendance_rate=rate,
        attendance_percentage=round(rate * 100),
    )


def build_month_calendar(
    year: int,
    month: int,
    records: Iterable[Any],
    today: date,
    join_date: Optional[date] = None,
    valid_until: Optional[date] = None,
    non_working_weekday: int = 6,
    person_id: Optional[int] = None,
    person_type: Optional[str] = None
) -> MonthCalendar:
    """
    Construye la cuadrícula de 42 días (domingo a sábado) del mes indicado.

    Args:
        year: Año mostrado
        month: Mes mostrado (1-12)
        records: Registros de asistencia de la persona (objetos con date,
            status y check_in_time)
        today: Fecha de hoy en la zona horaria del gimnasio
        join_date: Inicio de la membresía (None = sin límite)
        valid_until: Fin de la membresía, inclusive (None = sin límite)
        non_working_weekday: Día no laborable según date.weekday()

    Returns:
        MonthCalendar con las celdas y las estadísticas del mes
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Mes inválido: {month}")

    by_date: Dict[date, Any] = {r.date: r for r in records}
    start = grid_start(year, month)

    days: List[CalendarDay] = []
    for offset in range(GRID_DAYS):
        current = start + timedelta(days=offset)
        record = by_date.get(current)
        status = classify_day(
            current,
            year=year,
            month=month,
            today=today,
            record=record,
            join_date=join_date,
            valid_until=valid_until,
            non_working_weekday=non_working_weekday,
        )
        check_in = None
        if status in (DayClassification.PRESENT, DayClassification.ABSENT):
            check_in = record.check_in_time
        days.append(CalendarDay(
            date=current,
            day=current.day,
            in_month=current.month == month,
            is_today=current == today,
            status=status,
            check_in_time=check_in,
        ))

    return MonthCalendar(
        year=year,
        month=month,
        person_id=person_id,
        person_type=person_type,
        membership_start=join_date,
        membership_end=valid_until,
        days=days,
        stats=compute_month_stats(days),
    )
