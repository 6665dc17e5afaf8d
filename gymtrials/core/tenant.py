from fastapi import Header, Depends
from sqlalchemy.orm import Session
from typing import Optional
import logging

from gymtrials.core.exceptions import NotFoundError, ValidationError
from gymtrials.db.session import get_db
from gymtrials.models.gym import Gym
from gymtrials.repositories.gym import gym_repository

logger = logging.getLogger("tenant_verification")


async def get_tenant_id(
    x_gym_id: Optional[str] = Header(None, alias="X-Gym-ID")
) -> Optional[int]:
    """
    Obtiene el ID del tenant (gimnasio) únicamente del header X-Gym-ID.
    """
    if x_gym_id:
        try:
            return int(x_gym_id)
        except (ValueError, TypeError):
            logger.warning(f"Formato inválido para X-Gym-ID: {x_gym_id}")
            return None
    return None


async def get_current_gym(
    db: Session = Depends(get_db),
    tenant_id: Optional[int] = Depends(get_tenant_id)
) -> Gym:
    """
    Gimnasio del request según X-Gym-ID.

    Raises:
        ValidationError: Si falta el header o no es un entero
        NotFoundError: Si el gimnasio no existe o está inactivo
    """
    if tenant_id is None:
        raise ValidationError("Se requiere el header X-Gym-ID", code="MissingTenant")

    gym = gym_repository.get(db, id=tenant_id)
    if not gym or not gym.is_active:
        logger.warning(f"Gimnasio {tenant_id} no encontrado o inactivo")
        raise NotFoundError(f"Gimnasio {tenant_id} no encontrado")
    return gym
