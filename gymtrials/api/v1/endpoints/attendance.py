from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
from datetime import date

from redis.asyncio import Redis

from gymtrials.core.tenant import get_current_gym
from gymtrials.db.redis_client import get_redis_client
from gymtrials.db.session import get_db
from gymtrials.models.attendance import PersonType
from gymtrials.models.gym import Gym
from gymtrials.schemas.attendance import AttendanceBulkMark, AttendanceMark, AttendanceRecord
from gymtrials.services.attendance import attendance_service

router = APIRouter()


@router.get("/date/{day}", response_model=Dict[str, Any])
async def get_attendance_for_date(
    day: date,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    """Asistencia del día indicado, indexada por persona ("member_12", "trainer_3")."""
    attendance = attendance_service.get_attendance_for_date(db, current_gym.id, day)
    return {"success": True, "date": day, "attendance": attendance}


@router.post("", response_model=Dict[str, Any])
async def mark_attendance(
    mark_in: AttendanceMark,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym),
    redis_client: Optional[Redis] = Depends(get_redis_client)
) -> Any:
    """
    Registra o sobrescribe la asistencia de una persona en un día.

    Raises:
        NotFoundError: Si la persona no pertenece al gimnasio
    """
    record = attendance_service.mark_attendance(db, current_gym.id, mark_in)
    await attendance_service.invalidate_stats_cache(redis_client, current_gym.id)
    return {
        "success": True,
        "message": "Asistencia registrada",
        "attendance": AttendanceRecord.model_validate(record),
    }


@router.post("/bulk", response_model=Dict[str, Any])
async def bulk_mark_attendance(
    bulk_in: AttendanceBulkMark,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym),
    redis_client: Optional[Redis] = Depends(get_redis_client)
) -> Any:
    count = attendance_service.bulk_mark_attendance(db, current_gym.id, bulk_in.attendance_records)
    await attendance_service.invalidate_stats_cache(redis_client, current_gym.id)
    return {"success": True, "message": f"{count} registros de asistencia guardados", "count": count}


@router.get("/summary/{start_date}/{end_date}", response_model=Dict[str, Any])
async def get_attendance_summary(
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    summary = attendance_service.get_attendance_summary(db, current_gym.id, start_date, end_date)
    return {"success": True, "summary": summary}


@router.get("/stats/{month}/{year}", response_model=Dict[str, Any])
async def get_monthly_stats(
    month: int,
    year: int,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym),
    redis_client: Optional[Redis] = Depends(get_redis_client)
) -> Any:
    stats = await attendance_service.get_monthly_stats(db, current_gym.id, month, year, redis_client)
    return {"success": True, "stats": stats}


@router.get("/calendar/{person_type}/{person_id}", response_model=Dict[str, Any])
async def get_person_calendar(
    person_type: PersonType,
    person_id: int,
    year: int = Query(..., ge=1900, le=2200),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    """Calendario mensual de la persona reconciliado con su membresía, con estadísticas."""
    calendar = attendance_service.get_person_calendar(db, current_gym.id, person_type, person_id, year, month)
    return {"success": True, "calendar": calendar}


@router.delete("/cleanup", response_model=Dict[str, Any])
async def cleanup_attendance(
    before: date = Query(..., description="Se eliminan los registros anteriores a esta fecha"),
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym),
    redis_client: Optional[Redis] = Depends(get_redis_client)
) -> Any:
    deleted = attendance_service.cleanup_attendance(db, current_gym.id, before)
    await attendance_service.invalidate_stats_cache(redis_client, current_gym.id)
    return {"success": True, "message": f"{deleted} registros eliminados", "deleted": deleted}
