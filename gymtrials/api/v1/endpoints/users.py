from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Any, Dict

from gymtrials.db.session import get_db
from gymtrials.schemas.user import User, UserCreate
from gymtrials.services.trial_limits import trial_limit_service
from gymtrials.services.user import user_service

router = APIRouter()


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db)
) -> Any:
    """Crea un usuario con el cupo mensual de pruebas inicializado."""
    user = user_service.create_user(db, user_in)
    return {"success": True, "message": "Usuario creado", "user": User.model_validate(user)}


@router.get("/{user_id}", response_model=Dict[str, Any])
async def get_user(
    user_id: int,
    db: Session = Depends(get_db)
) -> Any:
    user = user_service.get_user(db, user_id)
    return {"success": True, "user": User.model_validate(user)}


@router.get("/{user_id}/trial-status", response_model=Dict[str, Any])
async def get_user_trial_status(
    user_id: int,
    db: Session = Depends(get_db)
) -> Any:
    return {"success": True, "data": trial_limit_service.get_user_trial_status(db, user_id)}
