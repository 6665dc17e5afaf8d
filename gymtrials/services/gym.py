import logging

from sqlalchemy.orm import Session

from gymtrials.core.exceptions import NotFoundError
from gymtrials.models.gym import Gym
from gymtrials.repositories.gym import gym_repository
from gymtrials.schemas.gym import GymCreate

logger = logging.getLogger(__name__)


class GymService:
    def create_gym(self, db: Session, gym_in: GymCreate) -> Gym:
        gym = gym_repository.create(db, obj_in=gym_in)
        logger.info(f"Gimnasio creado: {gym.id} ({gym.name})")
        return gym

    def get_gym(self, db: Session, gym_id: int) -> Gym:
        gym = gym_repository.get(db, id=gym_id)
        if not gym:
            raise NotFoundError(f"Gimnasio {gym_id} no encontrado")
        return gym


gym_service = GymService()
