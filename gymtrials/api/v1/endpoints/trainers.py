from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Any, Dict

from gymtrials.core.tenant import get_current_gym
from gymtrials.db.session import get_db
from gymtrials.models.gym import Gym
from gymtrials.schemas.member import Trainer, TrainerCreate
from gymtrials.services.member import member_service

router = APIRouter()


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_trainer(
    trainer_in: TrainerCreate,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    trainer = member_service.create_trainer(db, current_gym.id, trainer_in)
    return {"success": True, "message": "Entrenador creado", "trainer": Trainer.model_validate(trainer)}


@router.get("", response_model=Dict[str, Any])
async def list_trainers(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    trainers = member_service.list_trainers(db, current_gym.id, skip=skip, limit=limit)
    return {"success": True, "trainers": [Trainer.model_validate(t) for t in trainers]}


@router.get("/{trainer_id}", response_model=Dict[str, Any])
async def get_trainer(
    trainer_id: int,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    trainer = member_service.get_trainer(db, current_gym.id, trainer_id)
    return {"success": True, "trainer": Trainer.model_validate(trainer)}
