from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Session

from gymtrials.repositories.base import BaseRepository
from gymtrials.models.cash_validation import CashValidation, CashValidationStatus
from gymtrials.schemas.cash_validation import CashValidationCreate


class CashValidationRepository(BaseRepository[CashValidation, CashValidationCreate, CashValidationCreate]):
    def get_by_code(self, db: Session, *, code: str) -> Optional[CashValidation]:
        return db.query(CashValidation).filter(CashValidation.validation_code == code).first()

    def get_pending(self, db: Session, *, gym_id: int, now: datetime) -> List[CashValidation]:
        return db.query(CashValidation).filter(
            CashValidation.gym_id == gym_id,
            CashValidation.status == CashValidationStatus.PENDING,
            CashValidation.expires_at > now
        ).order_by(CashValidation.expires_at).all()

    def expire_stale(self, db: Session, *, now: datetime) -> int:
        """Marca como expiradas las solicitudes pendientes vencidas."""
        result = db.query(CashValidation).filter(
            CashValidation.status == CashValidationStatus.PENDING,
            CashValidation.expires_at <= now
        ).update({
            CashValidation.status: CashValidationStatus.EXPIRED,
            CashValidation.resolved_at: now
        }, synchronize_session=False)
        db.commit()
        return result


cash_validation_repository = CashValidationRepository(CashValidation)
