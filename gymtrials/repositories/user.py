from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Session

from gymtrials.repositories.base import BaseRepository
from gymtrials.models.user import User
from gymtrials.schemas.user import UserCreate


class UserRepository(BaseRepository[User, UserCreate, UserCreate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    # --- Actualizaciones atómicas del cupo de pruebas ---
    # No hacen commit: el servicio decide los límites de la transacción.

    def consume_trial(self, db: Session, *, user_id: int) -> bool:
        """
        Consume una prueba solo si queda cupo (UPDATE condicional).

        Returns:
            True si se actualizó la fila, False si no quedaba cupo
        """
        result = db.query(User).filter(
            User.id == user_id,
            User.remaining_trials > 0
        ).update({
            User.used_trials: User.used_trials + 1,
            User.remaining_trials: User.remaining_trials - 1
        }, synchronize_session=False)
        return result > 0

    def refund_trial(self, db: Session, *, user_id: int) -> bool:
        """Devuelve una prueba; used_trials nunca baja de 0."""
        result = db.query(User).filter(
            User.id == user_id,
            User.used_trials > 0
        ).update({
            User.used_trials: User.used_trials - 1,
            User.remaining_trials: User.remaining_trials + 1
        }, synchronize_session=False)
        return result > 0

    def reset_trial_cycle(
        self, db: Session, *, user_id: int, previous_reset: Optional[datetime], now: datetime
    ) -> bool:
        """
        Reinicia el ciclo mensual si nadie lo reinició desde la lectura
        (bloqueo optimista sobre trial_last_reset_date).
        """
        query = db.query(User).filter(User.id == user_id)
        if previous_reset is None:
            query = query.filter(User.trial_last_reset_date.is_(None))
        else:
            query = query.filter(User.trial_last_reset_date == previous_reset)
        result = query.update({
            User.used_trials: 0,
            User.remaining_trials: User.total_trials,
            User.trial_last_reset_date: now
        }, synchronize_session=False)
        return result > 0


user_repository = UserRepository(User)
