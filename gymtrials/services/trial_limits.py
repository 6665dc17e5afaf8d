"""
Límites de pruebas gratuitas.

Reúne el motor de elegibilidad (can_book_trial, solo lectura) y el registro
de reservas de prueba (book_trial / cancel_trial), que modifica el cupo del
usuario con UPDATE condicionales para que dos reservas simultáneas no puedan
consumir la misma prueba.

El ciclo de cupo es el mes natural de trial_last_reset_date. El reinicio es
perezoso: se calcula al leer y se persiste en la siguiente escritura.
"""

from typing import List, Optional, Tuple, Union
from datetime import date, datetime, timedelta
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gymtrials.core.config import get_settings
from gymtrials.core.exceptions import LimitExceededError, NotFoundError, UnauthorizedError, ValidationError
from gymtrials.core.timezone_utils import utcnow
from gymtrials.models.gym import Gym
from gymtrials.models.trial import BookingStatus, TrialHistoryEntry, TrialHistoryStatus
from gymtrials.models.user import User
from gymtrials.repositories.gym import gym_repository
from gymtrials.repositories.trial import trial_booking_repository, trial_history_repository
from gymtrials.repositories.user import user_repository
from gymtrials.schemas.trial import TrialEligibility
from gymtrials.schemas.user import TrialHistoryEntry as TrialHistoryEntrySchema, TrialUsage, UserTrialStatus

logger = logging.getLogger(__name__)

# Estados del historial que cuentan para el espaciado entre pruebas
ACTIVE_TRIAL_STATUSES = (TrialHistoryStatus.SCHEDULED, TrialHistoryStatus.COMPLETED)


def same_cycle(reset_date: Optional[datetime], now: datetime) -> bool:
    """True si reset_date pertenece al mismo ciclo mensual que now."""
    if reset_date is None:
        return False
    return (reset_date.year, reset_date.month) == (now.year, now.month)


def next_reset_date(now: datetime) -> date:
    """Primer día del mes siguiente."""
    if now.month == 12:
        return date(now.year + 1, 1, 1)
    return date(now.year, now.month + 1, 1)


def apply_monthly_reset(usage: TrialUsage, now: datetime) -> TrialUsage:
    """
    Devuelve el uso de pruebas tal como queda tras el reinicio mensual.
    Función pura: no toca la base de datos.
    """
    if same_cycle(usage.last_reset_date, now):
        return usage.model_copy(update={"next_reset_date": next_reset_date(now)})
    return TrialUsage(
        total_trials=usage.total_trials,
        used_trials=0,
        remaining_trials=usage.total_trials,
        last_reset_date=now,
        next_reset_date=next_reset_date(now),
    )


def parse_requested_date(value: Union[date, datetime, str]) -> date:
    """Normaliza la fecha solicitada; una cadena mal formada es un error de validación."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        # Fecha con hora: debe ser un datetime ISO completo y válido
        return datetime.fromisoformat(text).date()
    except (TypeError, ValueError):
        raise ValidationError(f"Fecha inválida: {value}", code="InvalidArgument")


class TrialLimitService:
    """Servicio para evaluar y registrar el uso del cupo de pruebas."""

    def get_usage(self, user: User, now: Optional[datetime] = None) -> TrialUsage:
        stored = TrialUsage(
            total_trials=user.total_trials,
            used_trials=user.used_trials,
            remaining_trials=user.remaining_trials,
            last_reset_date=user.trial_last_reset_date,
        )
        return apply_monthly_reset(stored, now or utcnow())

    def get_spacing_days(self, gym: Gym) -> int:
        if gym.trial_retry_spacing_days is not None:
            return gym.trial_retry_spacing_days
        return get_settings().TRIAL_RETRY_SPACING_DAYS

    def get_user_trial_status(self, db: Session, user_id: int, now: Optional[datetime] = None) -> UserTrialStatus:
        user = self._get_user(db, user_id)
        usage = self.get_usage(user, now)
        history = trial_history_repository.get_for_user(db, user_id=user.id)
        return UserTrialStatus(
            **usage.model_dump(),
            history=[TrialHistoryEntrySchema.model_validate(e) for e in history],
        )

    # === Motor de elegibilidad ===

    def can_book_trial(
        self,
        db: Session,
        user_id: int,
        gym_id: int,
        requested_date: Union[date, datetime, str],
        now: Optional[datetime] = None
    ) -> TrialEligibility:
        """
        Decide si el usuario puede reservar una prueba en el gimnasio para la fecha dada.

        Raises:
            ValidationError: Si la fecha no se puede interpretar
            NotFoundError: Si el usuario o el gimnasio no existen
        """
        requested = parse_requested_date(requested_date)
        user = self._get_user(db, user_id)
        gym = self._get_gym(db, gym_id)
        usage = self.get_usage(user, now)

        if usage.remaining_trials <= 0:
            return TrialEligibility(
                can_book=False,
                message=self._limit_message(usage),
                restrictions=self._limit_restrictions(usage),
            )

        blocking = self._find_recent_trial(db, user.id, gym, requested)
        if blocking:
            entry, spacing = blocking
            return TrialEligibility(
                can_book=False,
                message=self._spacing_message(gym, spacing),
                restrictions=self._spacing_restrictions(entry, spacing),
            )

        return TrialEligibility(
            can_book=True,
            message=f"Puedes reservar tu prueba. Te quedan {usage.remaining_trials} este mes",
            restrictions={"remaining_trials": usage.remaining_trials, "total_trials": usage.total_trials},
        )

    # === Registro de reservas ===

    def book_trial(
        self,
        db: Session,
        user_id: int,
        gym_id: int,
        booking_id: int,
        now: Optional[datetime] = None
    ) -> TrialHistoryEntry:
        """
        Registra la prueba de una reserva y consume una del cupo.

        Idempotente por booking_id: si la reserva ya está en el historial se
        devuelve la entrada existente sin tocar los contadores. La comprobación
        de cupo y el consumo son un único UPDATE condicional.

        Raises:
            NotFoundError: Usuario, gimnasio o reserva inexistentes
            ValidationError: Si la reserva es de otro gimnasio
            UnauthorizedError: Si la reserva es de otro usuario
            LimitExceededError: Sin cupo o espaciado entre pruebas no respetado
        """
        now = now or utcnow()
        user = self._get_user(db, user_id)
        booking = trial_booking_repository.get(db, id=booking_id)
        if not booking:
            raise NotFoundError(f"Reserva {booking_id} no encontrada")
        if booking.gym_id != gym_id:
            raise ValidationError(f"La reserva {booking_id} no pertenece al gimnasio {gym_id}")
        if booking.user_id is not None and booking.user_id != user_id:
            raise UnauthorizedError(f"La reserva {booking_id} no pertenece al usuario {user_id}")

        existing = trial_history_repository.get_by_booking(db, booking_id=booking_id)
        if existing:
            logger.info(f"Reserva {booking_id} ya registrada en el historial del usuario {user_id}, se ignora")
            return existing

        gym = self._get_gym(db, gym_id)
        self._ensure_current_cycle(db, user, now)

        blocking = self._find_recent_trial(db, user.id, gym, booking.preferred_date)
        if blocking:
            db.rollback()
            entry, spacing = blocking
            raise LimitExceededError(
                self._spacing_message(gym, spacing),
                restrictions=self._spacing_restrictions(entry, spacing),
            )

        entry = TrialHistoryEntry(
            user_id=user.id,
            booking_id=booking.id,
            gym_id=gym.id,
            gym_name=gym.name,
            booking_date=now,
            trial_date=booking.preferred_date,
            status=TrialHistoryStatus.SCHEDULED,
        )
        try:
            if not user_repository.consume_trial(db, user_id=user.id):
                db.rollback()
                db.refresh(user)
                usage = self.get_usage(user, now)
                raise LimitExceededError(self._limit_message(usage), restrictions=self._limit_restrictions(usage))
            db.add(entry)
            db.commit()
        except IntegrityError:
            # Otra petición registró la misma reserva en paralelo
            db.rollback()
            existing = trial_history_repository.get_by_booking(db, booking_id=booking_id)
            if existing:
                logger.warning(f"Registro duplicado de la reserva {booking_id} descartado")
                return existing
            raise

        db.refresh(entry)
        logger.info(f"Prueba registrada: usuario {user.id}, gym {gym.id}, reserva {booking.id}")
        return entry

    def cancel_trial(
        self,
        db: Session,
        user_id: int,
        booking_id: int,
        now: Optional[datetime] = None
    ) -> Optional[TrialHistoryEntry]:
        """
        Marca como cancelada la entrada del historial y devuelve la prueba al cupo.

        La entrada nunca se borra. Solo se devuelve la prueba si estaba
        programada y se reservó dentro del ciclo actual; repetir la
        cancelación no tiene efecto.
        """
        now = now or utcnow()
        entry = trial_history_repository.get_by_booking(db, booking_id=booking_id)
        if not entry or entry.user_id != user_id:
            logger.info(f"Sin entrada de historial para la reserva {booking_id} del usuario {user_id}")
            return None
        if entry.status != TrialHistoryStatus.SCHEDULED:
            return entry

        entry.status = TrialHistoryStatus.CANCELLED
        if same_cycle(entry.booking_date, now):
            if not user_repository.refund_trial(db, user_id=user_id):
                logger.warning(f"Usuario {user_id} sin pruebas usadas que devolver (reserva {booking_id})")
        db.commit()
        db.refresh(entry)
        logger.info(f"Prueba cancelada: usuario {user_id}, reserva {booking_id}")
        return entry

    def sync_history_status(self, db: Session, booking_id: int, status: BookingStatus) -> Optional[TrialHistoryEntry]:
        """Refleja en el historial los cambios de estado hechos por el gimnasio (sin devolver cupo)."""
        mapping = {
            BookingStatus.COMPLETED: TrialHistoryStatus.COMPLETED,
            BookingStatus.CANCELLED: TrialHistoryStatus.CANCELLED,
        }
        target = mapping.get(status)
        if target is None:
            return None
        entry = trial_history_repository.get_by_booking(db, booking_id=booking_id)
        if not entry or entry.status != TrialHistoryStatus.SCHEDULED:
            return entry
        entry.status = target
        db.commit()
        db.refresh(entry)
        return entry

    # === Helpers ===

    def _get_user(self, db: Session, user_id: int) -> User:
        user = user_repository.get(db, id=user_id)
        if not user:
            raise NotFoundError(f"Usuario {user_id} no encontrado")
        return user

    def _get_gym(self, db: Session, gym_id: int) -> Gym:
        gym = gym_repository.get(db, id=gym_id)
        if not gym:
            raise NotFoundError(f"Gimnasio {gym_id} no encontrado")
        return gym

    def _ensure_current_cycle(self, db: Session, user: User, now: datetime) -> None:
        if same_cycle(user.trial_last_reset_date, now):
            return
        reset = user_repository.reset_trial_cycle(
            db, user_id=user.id, previous_reset=user.trial_last_reset_date, now=now
        )
        if reset:
            logger.info(f"Cupo de pruebas reiniciado para el usuario {user.id}")
        db.expire(user)

    def _find_recent_trial(
        self, db: Session, user_id: int, gym: Gym, requested: date
    ) -> Optional[Tuple[TrialHistoryEntry, int]]:
        spacing = self.get_spacing_days(gym)
        if spacing <= 0:
            return None
        entries: List[TrialHistoryEntry] = trial_history_repository.get_for_user(
            db, user_id=user_id, gym_id=gym.id, statuses=ACTIVE_TRIAL_STATUSES
        )
        conflicts = [e for e in entries if abs((e.trial_date - requested).days) < spacing]
        if not conflicts:
            return None
        return max(conflicts, key=lambda e: e.trial_date), spacing

    @staticmethod
    def _limit_message(usage: TrialUsage) -> str:
        return (
            f"Has alcanzado el límite mensual de {usage.total_trials} pruebas. "
            f"El cupo se renueva el {usage.next_reset_date}"
        )

    @staticmethod
    def _limit_restrictions(usage: TrialUsage) -> dict:
        return {
            "total_trials": usage.total_trials,
            "used_trials": usage.used_trials,
            "remaining_trials": usage.remaining_trials,
            "next_reset_date": usage.next_reset_date.isoformat() if usage.next_reset_date else None,
        }

    @staticmethod
    def _spacing_message(gym: Gym, spacing: int) -> str:
        return f"Ya usaste una prueba en {gym.name} recientemente. Debes esperar {spacing} días entre pruebas"

    @staticmethod
    def _spacing_restrictions(entry: TrialHistoryEntry, spacing: int) -> dict:
        return {
            "gym_id": entry.gym_id,
            "last_trial_date": entry.trial_date.isoformat(),
            "next_eligible_date": (entry.trial_date + timedelta(days=spacing)).isoformat(),
            "spacing_days": spacing,
        }


# Instancia global del servicio
trial_limit_service = TrialLimitService()
