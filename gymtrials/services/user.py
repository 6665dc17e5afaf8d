import logging

from sqlalchemy.orm import Session

from gymtrials.core.config import get_settings
from gymtrials.core.exceptions import ConflictError, NotFoundError
from gymtrials.core.timezone_utils import utcnow
from gymtrials.models.user import User
from gymtrials.repositories.user import user_repository
from gymtrials.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    def create_user(self, db: Session, user_in: UserCreate) -> User:
        """
        Crea un usuario con el cupo de pruebas inicializado para el ciclo actual.

        Raises:
            ConflictError: Si el email ya está registrado
        """
        if user_repository.get_by_email(db, email=user_in.email):
            raise ConflictError(f"El email {user_in.email} ya está registrado", code="DuplicateEmail")

        total = user_in.total_trials
        if total is None:
            total = get_settings().TRIAL_DEFAULT_TOTAL
        data = user_in.model_dump(exclude={"total_trials"})
        data.update(
            total_trials=total,
            used_trials=0,
            remaining_trials=total,
            trial_last_reset_date=utcnow(),
        )
        user = user_repository.create(db, obj_in=data)
        logger.info(f"Usuario {user.id} creado con {total} pruebas mensuales")
        return user

    def get_user(self, db: Session, user_id: int) -> User:
        user = user_repository.get(db, id=user_id)
        if not user:
            raise NotFoundError(f"Usuario {user_id} no encontrado")
        return user


user_service = UserService()
