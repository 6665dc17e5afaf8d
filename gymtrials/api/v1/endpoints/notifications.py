from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, Dict

from gymtrials.core.tenant import get_current_gym
from gymtrials.db.session import get_db
from gymtrials.models.gym import Gym
from gymtrials.schemas.notification import Notification
from gymtrials.services.notification_service import notification_dispatcher

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def get_gym_notifications(
    unread_only: bool = Query(False),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    """Bandeja de notificaciones del administrador del gimnasio."""
    notifications = notification_dispatcher.get_inbox(
        db, gym_id=current_gym.id, unread_only=unread_only, skip=skip, limit=limit
    )
    return {"success": True, "notifications": [Notification.model_validate(n) for n in notifications]}


@router.put("/{notification_id}/read", response_model=Dict[str, Any])
async def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    notification = notification_dispatcher.mark_as_read(db, notification_id=notification_id, gym_id=current_gym.id)
    return {"success": True, "notification": Notification.model_validate(notification)}
