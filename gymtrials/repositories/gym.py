from gymtrials.repositories.base import BaseRepository
from gymtrials.models.gym import Gym
from gymtrials.schemas.gym import GymCreate


class GymRepository(BaseRepository[Gym, GymCreate, GymCreate]):
    pass


gym_repository = GymRepository(Gym)
