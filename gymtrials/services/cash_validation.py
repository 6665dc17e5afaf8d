"""
Códigos de validación de pagos en efectivo.

El cliente genera un código al elegir pago en efectivo y el administrador lo
confirma en el mostrador antes de que caduque. Al confirmarlo se da de alta
el miembro con la duración del plan pagado.
"""

from typing import List, Optional
from datetime import date, datetime, timedelta
import calendar
import logging
import secrets
import string

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gymtrials.core.config import get_settings
from gymtrials.core.exceptions import NotFoundError, ValidationError
from gymtrials.core.timezone_utils import get_gym_today, utcnow
from gymtrials.db.session import SessionLocal
from gymtrials.models.cash_validation import CashValidation, CashValidationStatus
from gymtrials.models.member import Member
from gymtrials.repositories.cash_validation import cash_validation_repository
from gymtrials.repositories.gym import gym_repository
from gymtrials.schemas.cash_validation import CashValidation as CashValidationSchema, CashValidationCreate
from gymtrials.services.notification_service import notification_dispatcher

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS = 5


def generate_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def add_months(start: date, months: int) -> date:
    """Suma meses conservando el día, ajustado al último día del mes destino."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def to_schema(validation: CashValidation, now: datetime) -> CashValidationSchema:
    result = CashValidationSchema.model_validate(validation)
    if validation.status == CashValidationStatus.PENDING:
        result.time_left = max(0, int((validation.expires_at - now).total_seconds()))
    return result


class CashValidationService:

    def create_validation(
        self, db: Session, gym_id: int, data: CashValidationCreate, now: Optional[datetime] = None
    ) -> CashValidation:
        """
        Crea una solicitud pendiente con un código único de 6 caracteres.

        Raises:
            NotFoundError: Si el gimnasio no existe
        """
        now = now or utcnow()
        gym = gym_repository.get(db, id=gym_id)
        if not gym:
            raise NotFoundError(f"Gimnasio {gym_id} no encontrado")

        ttl = get_settings().CASH_VALIDATION_TTL_SECONDS
        for attempt in range(MAX_CODE_ATTEMPTS):
            validation = CashValidation(
                validation_code=generate_code(),
                gym_id=gym_id,
                status=CashValidationStatus.PENDING,
                created_at=now,
                expires_at=now + timedelta(seconds=ttl),
                **data.model_dump(),
            )
            db.add(validation)
            try:
                db.commit()
                break
            except IntegrityError:
                db.rollback()
                logger.warning(f"Código de validación repetido, reintentando ({attempt + 1})")
        else:
            raise ValidationError("No se pudo generar un código de validación único")

        db.refresh(validation)
        logger.info(f"Validación de efectivo {validation.validation_code} creada en gym {gym_id}")
        notification_dispatcher.dispatch(
            db,
            gym_id=gym_id,
            type="cash_validation",
            title="Pago en efectivo pendiente",
            message=(
                f"{validation.member_name} quiere pagar {validation.amount} en efectivo "
                f"({validation.plan_name}). Código: {validation.validation_code}"
            ),
            related_id=validation.id,
            priority="high",
        )
        return validation

    def list_pending(self, db: Session, gym_id: int, now: Optional[datetime] = None) -> List[CashValidationSchema]:
        now = now or utcnow()
        return [to_schema(v, now) for v in cash_validation_repository.get_pending(db, gym_id=gym_id, now=now)]

    def _get(self, db: Session, code: str) -> CashValidation:
        validation = cash_validation_repository.get_by_code(db, code=code.strip().upper())
        if not validation:
            raise NotFoundError(f"Código de validación {code} no encontrado")
        return validation

    def _expire_if_due(self, db: Session, validation: CashValidation, now: datetime) -> None:
        if validation.status == CashValidationStatus.PENDING and validation.expires_at <= now:
            validation.status = CashValidationStatus.EXPIRED
            validation.resolved_at = now
            db.commit()
            db.refresh(validation)
            logger.info(f"Validación {validation.validation_code} expirada")

    def check_status(self, db: Session, code: str, now: Optional[datetime] = None) -> CashValidationSchema:
        now = now or utcnow()
        validation = self._get(db, code)
        self._expire_if_due(db, validation, now)
        return to_schema(validation, now)

    def _require_pending(self, db: Session, code: str, now: datetime) -> CashValidation:
        validation = self._get(db, code)
        self._expire_if_due(db, validation, now)
        if validation.status != CashValidationStatus.PENDING:
            raise ValidationError(
                f"La validación {validation.validation_code} ya no está pendiente ({validation.status.value})",
                code="ValidationNotPending",
            )
        return validation

    def confirm(self, db: Session, code: str, now: Optional[datetime] = None) -> CashValidation:
        """
        Confirma el pago y da de alta al miembro desde hoy hasta hoy + duración del plan.

        Raises:
            NotFoundError: Si el código no existe
            ValidationError: Si la solicitud ya no está pendiente o ha expirado
        """
        now = now or utcnow()
        validation = self._require_pending(db, code, now)
        gym = gym_repository.get(db, id=validation.gym_id)
        today = get_gym_today(gym.timezone if gym else None)

        member = Member(
            gym_id=validation.gym_id,
            name=validation.member_name,
            email=validation.email,
            phone=validation.phone,
            plan_name=validation.plan_name,
            join_date=today,
            membership_valid_until=add_months(today, validation.duration_months),
        )
        db.add(member)
        db.flush()
        validation.member_id = member.id
        validation.status = CashValidationStatus.CONFIRMED
        validation.resolved_at = now
        db.commit()
        db.refresh(validation)
        logger.info(f"Validación {validation.validation_code} confirmada, miembro {member.id} creado")
        return validation

    def reject(self, db: Session, code: str, now: Optional[datetime] = None) -> CashValidation:
        now = now or utcnow()
        validation = self._require_pending(db, code, now)
        validation.status = CashValidationStatus.REJECTED
        validation.resolved_at = now
        db.commit()
        db.refresh(validation)
        logger.info(f"Validación {validation.validation_code} rechazada")
        return validation

    def expire_stale_validations(self, db: Optional[Session] = None, now: Optional[datetime] = None) -> int:
        """Barrido periódico de solicitudes vencidas. Abre su propia sesión si no recibe una."""
        own_session = db is None
        db = db or SessionLocal()
        try:
            expired = cash_validation_repository.expire_stale(db, now=now or utcnow())
            if expired:
                logger.info(f"Expiradas {expired} validaciones de efectivo")
            return expired
        finally:
            if own_session:
                db.close()


cash_validation_service = CashValidationService()
