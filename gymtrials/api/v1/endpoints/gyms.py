from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Any, Dict

from gymtrials.db.session import get_db
from gymtrials.schemas.gym import GymCreate, GymSchema
from gymtrials.services.gym import gym_service

router = APIRouter()


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_gym(
    gym_in: GymCreate,
    db: Session = Depends(get_db)
) -> Any:
    gym = gym_service.create_gym(db, gym_in)
    return {"success": True, "message": "Gimnasio creado", "gym": GymSchema.model_validate(gym)}


@router.get("/{gym_id}", response_model=Dict[str, Any])
async def get_gym(
    gym_id: int,
    db: Session = Depends(get_db)
) -> Any:
    gym = gym_service.get_gym(db, gym_id)
    return {"success": True, "gym": GymSchema.model_validate(gym)}
