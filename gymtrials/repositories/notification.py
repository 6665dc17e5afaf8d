from typing import List, Optional
from sqlalchemy.orm import Session

from gymtrials.repositories.base import BaseRepository
from gymtrials.models.notification import Notification
from gymtrials.schemas.notification import Notification as NotificationSchema


class NotificationRepository(BaseRepository[Notification, NotificationSchema, NotificationSchema]):
    def get_for_gym(
        self,
        db: Session,
        *,
        gym_id: int,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50
    ) -> List[Notification]:
        """Bandeja del administrador del gimnasio (notificaciones sin user_id)."""
        query = db.query(Notification).filter(
            Notification.gym_id == gym_id,
            Notification.user_id.is_(None)
        )
        if unread_only:
            query = query.filter(Notification.is_read == False)  # noqa: E712
        return query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()

    def mark_as_read(self, db: Session, *, notification_id: int, gym_id: int) -> Optional[Notification]:
        notification = self.get(db, id=notification_id, gym_id=gym_id)
        if not notification:
            return None
        notification.is_read = True
        db.commit()
        db.refresh(notification)
        return notification


notification_repository = NotificationRepository(Notification)
