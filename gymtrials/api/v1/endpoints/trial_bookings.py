from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from gymtrials.core.auth import get_current_user, get_optional_user
from gymtrials.db.session import get_db
from gymtrials.middleware.rate_limit import limiter, RATE_LIMITS
from gymtrials.models.trial import SessionType
from gymtrials.models.user import User
from gymtrials.schemas.trial import TrialBooking, TrialBookingCreate, TrialBookingStatusUpdate
from gymtrials.services.trial_booking import trial_booking_service
from gymtrials.services.trial_limits import trial_limit_service

router = APIRouter()


@router.post("/book-trial", response_model=Dict[str, Any])
@limiter.limit(RATE_LIMITS["bookings"])
async def create_booking(
    request: Request,
    booking_in: TrialBookingCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
) -> Any:
    """
    Crea una reserva. Las reservas de prueba de usuarios identificados
    consumen una prueba del cupo mensual.

    Raises:
        LimitExceededError: Si el usuario no puede reservar otra prueba (400, con restricciones)
        NotFoundError: Si el gimnasio no existe
    """
    booking = trial_booking_service.create_booking(db, booking_in, current_user=current_user)
    return {
        "success": True,
        "message": "Reserva creada correctamente",
        "booking": TrialBooking.model_validate(booking),
    }


@router.get("/bookings", response_model=Dict[str, Any])
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    gym_id: Optional[int] = Query(None),
    session_type: Optional[SessionType] = Query(None),
    db: Session = Depends(get_db)
) -> Any:
    """Lista paginada de reservas, más recientes primero."""
    result = trial_booking_service.list_bookings(
        db, page=page, limit=limit, status=status, gym_id=gym_id, session_type=session_type
    )
    return {"success": True, **result.model_dump()}


@router.put("/booking/{booking_id}/status", response_model=Dict[str, Any])
async def update_booking_status(
    booking_id: int,
    status_in: TrialBookingStatusUpdate,
    db: Session = Depends(get_db)
) -> Any:
    booking = trial_booking_service.update_booking_status(
        db, booking_id, status_in.status, admin_notes=status_in.admin_notes
    )
    return {
        "success": True,
        "message": "Estado de la reserva actualizado",
        "booking": TrialBooking.model_validate(booking),
    }


@router.delete("/booking/{booking_id}", response_model=Dict[str, Any])
async def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db)
) -> Any:
    trial_booking_service.delete_booking(db, booking_id)
    return {"success": True, "message": "Reserva eliminada"}


@router.get("/trial-status", response_model=Dict[str, Any])
async def get_trial_status(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Cupo de pruebas del usuario (con el reinicio mensual aplicado) e historial."""
    trial_status = trial_limit_service.get_user_trial_status(db, current_user.id)
    return {"success": True, "data": trial_status}


@router.get("/check-availability", response_model=Dict[str, Any])
async def check_availability(
    gym_id: int = Query(..., gt=0),
    date: str = Query(..., description="Fecha solicitada (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    eligibility = trial_booking_service.check_trial_availability(db, current_user, gym_id, date)
    return {
        "success": True,
        "can_book": eligibility.can_book,
        "message": eligibility.message,
        "restrictions": eligibility.restrictions,
    }


@router.put("/cancel/{booking_id}", response_model=Dict[str, Any])
async def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Cancela una reserva propia. Las reservas de prueba devuelven la prueba
    al cupo si se reservaron en el ciclo actual.
    """
    booking = trial_booking_service.cancel_booking(db, current_user, booking_id)
    return {
        "success": True,
        "message": "Reserva cancelada correctamente",
        "booking": TrialBooking.model_validate(booking),
    }


@router.get("/history", response_model=Dict[str, Any])
async def get_trial_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    history = trial_booking_service.get_trial_history(db, current_user, page=page, limit=limit, status=status)
    return {"success": True, "data": history}
