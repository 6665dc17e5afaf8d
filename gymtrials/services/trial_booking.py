"""
Flujo de reservas de sesiones (prueba, entrenamiento personal, clase, consulta).

Las reservas de prueba de usuarios identificados pasan por el servicio de
límites: la reserva y el consumo del cupo se confirman en la misma
transacción. Las notificaciones se envían después del commit y nunca hacen
fallar la operación.
"""

from typing import Optional, Union
from datetime import date, datetime
import logging
import math

from sqlalchemy.orm import Session

from gymtrials.core.exceptions import LimitExceededError, NotFoundError, UnauthorizedError, ValidationError
from gymtrials.core.timezone_utils import utcnow
from gymtrials.models.trial import BookingStatus, SessionType, TrialBooking
from gymtrials.models.user import User
from gymtrials.repositories.gym import gym_repository
from gymtrials.repositories.trial import trial_booking_repository
from gymtrials.schemas.trial import (
    TrialBooking as TrialBookingSchema,
    TrialBookingCreate,
    TrialBookingList,
    TrialEligibility,
    TrialHistoryPage,
)
from gymtrials.services.notification_service import notification_dispatcher
from gymtrials.services.trial_limits import trial_limit_service

logger = logging.getLogger(__name__)

# Estados desde los que el cliente ya no puede cancelar
FINAL_STATUSES = (BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW)


def parse_status(value: Optional[Union[str, BookingStatus]]) -> Optional[BookingStatus]:
    if value is None or isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(value)
    except ValueError:
        raise ValidationError(f"Estado de reserva inválido: {value}", code="InvalidStatus")


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


class TrialBookingService:

    def create_booking(
        self,
        db: Session,
        booking_in: TrialBookingCreate,
        current_user: Optional[User] = None,
        now: Optional[datetime] = None
    ) -> TrialBooking:
        """
        Crea una reserva en estado pending.

        Si el usuario está identificado y la sesión es de prueba, se comprueba
        la elegibilidad y se registra la prueba en su historial.

        Raises:
            NotFoundError: Si el gimnasio no existe
            LimitExceededError: Si el usuario no puede reservar otra prueba
        """
        gym = gym_repository.get(db, id=booking_in.gym_id)
        if not gym:
            raise NotFoundError(f"Gimnasio {booking_in.gym_id} no encontrado")

        is_tracked_trial = current_user is not None and booking_in.session_type == SessionType.TRIAL
        if is_tracked_trial:
            eligibility = trial_limit_service.can_book_trial(
                db, current_user.id, gym.id, booking_in.preferred_date, now=now
            )
            if not eligibility.can_book:
                logger.info(f"Reserva de prueba denegada al usuario {current_user.id} en gym {gym.id}")
                raise LimitExceededError(eligibility.message, restrictions=eligibility.restrictions)

        booking = TrialBooking(
            **booking_in.model_dump(),
            user_id=current_user.id if current_user else None,
            status=BookingStatus.PENDING,
        )
        db.add(booking)

        if is_tracked_trial:
            # La reserva se confirma junto con el consumo del cupo
            db.flush()
            trial_limit_service.book_trial(db, current_user.id, gym.id, booking.id, now=now)
        else:
            db.commit()
        db.refresh(booking)
        logger.info(f"Reserva {booking.id} ({booking.session_type.value}) creada en gym {gym.id}")

        notification_dispatcher.dispatch(
            db,
            gym_id=gym.id,
            type="trial_booking",
            title="Nueva reserva de prueba",
            message=f"{booking.name} ha reservado una sesión {booking.session_type.value} en {gym.name}",
            related_id=booking.id,
            priority="medium",
        )
        return booking

    def list_bookings(
        self,
        db: Session,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        gym_id: Optional[int] = None,
        session_type: Optional[SessionType] = None
    ) -> TrialBookingList:
        bookings, total = trial_booking_repository.get_page(
            db,
            page=page,
            limit=limit,
            status=parse_status(status),
            gym_id=gym_id,
            session_type=session_type,
        )
        return TrialBookingList(
            bookings=[TrialBookingSchema.model_validate(b) for b in bookings],
            total=total,
            total_pages=total_pages(total, limit),
            current_page=page,
        )

    def get_booking(self, db: Session, booking_id: int) -> TrialBooking:
        booking = trial_booking_repository.get(db, id=booking_id)
        if not booking:
            raise NotFoundError(f"Reserva {booking_id} no encontrada")
        return booking

    def update_booking_status(
        self, db: Session, booking_id: int, status: str, admin_notes: Optional[str] = None
    ) -> TrialBooking:
        """
        Cambio de estado hecho por el gimnasio.

        Raises:
            ValidationError: Si el estado no es válido
            NotFoundError: Si la reserva no existe
        """
        new_status = parse_status(status)
        booking = self.get_booking(db, booking_id)

        booking.status = new_status
        if admin_notes is not None:
            booking.admin_notes = admin_notes
        if new_status == BookingStatus.CANCELLED and booking.cancelled_at is None:
            booking.cancelled_at = utcnow()
        db.commit()
        db.refresh(booking)
        logger.info(f"Reserva {booking_id} pasa a {new_status.value}")

        if booking.session_type == SessionType.TRIAL:
            trial_limit_service.sync_history_status(db, booking.id, new_status)

        if booking.user_id is not None:
            notification_dispatcher.dispatch(
                db,
                gym_id=booking.gym_id,
                user_id=booking.user_id,
                type="booking_status",
                title="Actualización de tu reserva",
                message=f"Tu reserva del {booking.preferred_date} está ahora {new_status.value}",
                related_id=booking.id,
            )
        return booking

    def delete_booking(self, db: Session, booking_id: int) -> TrialBooking:
        """Borra la reserva. La entrada del historial de pruebas se conserva."""
        booking = trial_booking_repository.remove(db, id=self.get_booking(db, booking_id).id)
        logger.info(f"Reserva {booking_id} eliminada")
        return booking

    def check_trial_availability(
        self, db: Session, user: User, gym_id: int, requested_date: Union[date, str]
    ) -> TrialEligibility:
        return trial_limit_service.can_book_trial(db, user.id, gym_id, requested_date)

    def cancel_booking(self, db: Session, user: User, booking_id: int, now: Optional[datetime] = None) -> TrialBooking:
        """
        Cancelación por parte del cliente.

        Raises:
            NotFoundError: Si la reserva no existe
            UnauthorizedError: Si la reserva no es del usuario
            ValidationError: Si la reserva ya está cancelada o finalizada
        """
        now = now or utcnow()
        booking = self.get_booking(db, booking_id)
        if booking.email != user.email and booking.user_id != user.id:
            raise UnauthorizedError("No tienes permiso para cancelar esta reserva")
        if booking.status in FINAL_STATUSES:
            raise ValidationError(f"La reserva ya está {booking.status.value}", code="BookingNotCancellable")

        booking.status = BookingStatus.CANCELLED
        booking.cancelled_at = now
        db.commit()
        db.refresh(booking)
        logger.info(f"Reserva {booking_id} cancelada por el usuario {user.id}")

        if booking.session_type == SessionType.TRIAL:
            # El reembolso es para el titular de la reserva
            trial_limit_service.cancel_trial(db, booking.user_id or user.id, booking.id, now=now)
        return booking

    def get_trial_history(
        self, db: Session, user: User, page: int = 1, limit: int = 10, status: Optional[str] = None
    ) -> TrialHistoryPage:
        bookings, total = trial_booking_repository.get_page(
            db,
            page=page,
            limit=limit,
            status=parse_status(status),
            session_type=SessionType.TRIAL,
            user_id=user.id,
        )
        return TrialHistoryPage(
            trial_limits=trial_limit_service.get_usage(user),
            bookings=[TrialBookingSchema.model_validate(b) for b in bookings],
            total=total,
            total_pages=total_pages(total, limit),
            current_page=page,
        )


trial_booking_service = TrialBookingService()
