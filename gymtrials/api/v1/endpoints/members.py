from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from gymtrials.core.tenant import get_current_gym
from gymtrials.db.session import get_db
from gymtrials.models.gym import Gym
from gymtrials.schemas.member import Member, MemberCreate, MemberUpdate
from gymtrials.services.member import member_service

router = APIRouter()


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_member(
    member_in: MemberCreate,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    """
    Registra un miembro. Si ya existe otro con el mismo email o teléfono se
    responde 409, salvo que se envíe force=true.
    """
    member = member_service.create_member(db, current_gym.id, member_in)
    return {"success": True, "message": "Miembro creado", "member": Member.model_validate(member)}


@router.get("", response_model=Dict[str, Any])
async def list_members(
    search: Optional[str] = Query(None, description="Busca por nombre o email"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    members = member_service.list_members(db, current_gym.id, search=search, skip=skip, limit=limit)
    return {"success": True, "members": [Member.model_validate(m) for m in members]}


@router.get("/{member_id}", response_model=Dict[str, Any])
async def get_member(
    member_id: int,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    member = member_service.get_member(db, current_gym.id, member_id)
    return {"success": True, "member": Member.model_validate(member)}


@router.put("/{member_id}", response_model=Dict[str, Any])
async def update_member(
    member_id: int,
    member_in: MemberUpdate,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    member = member_service.update_member(db, current_gym.id, member_id, member_in)
    return {"success": True, "message": "Miembro actualizado", "member": Member.model_validate(member)}


@router.delete("/{member_id}", response_model=Dict[str, Any])
async def delete_member(
    member_id: int,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    member_service.delete_member(db, current_gym.id, member_id)
    return {"success": True, "message": "Miembro eliminado"}
