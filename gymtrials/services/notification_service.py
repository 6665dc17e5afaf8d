import requests
import logging
import json
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from gymtrials.core.config import get_settings
from gymtrials.core.exceptions import NotFoundError
from gymtrials.models.notification import Notification
from gymtrials.repositories.notification import notification_repository

logger = logging.getLogger(__name__)


class OneSignalService:
    def __init__(self, app_id: Optional[str], api_key: Optional[str]):
        self.app_id = app_id
        self.api_key = api_key
        self.base_url = "https://onesignal.com/api/v1/notifications"
        self.headers = {
            "Authorization": f"Basic {self.api_key}",
            "Content-Type": "application/json; charset=utf-8"
        }

    @property
    def enabled(self) -> bool:
        return bool(self.app_id and self.api_key)

    def send_to_users(
        self,
        user_ids: List[str],
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Envía una notificación push a usuarios por su user_id externo.

        Returns:
            Diccionario con resultado del envío
        """
        if not user_ids:
            return {"success": False, "errors": ["No user IDs provided"]}
        if not self.enabled:
            return {"success": False, "errors": ["OneSignal not configured"]}

        try:
            payload = {
                "app_id": self.app_id,
                "include_external_user_ids": user_ids,
                "channel_for_external_user_ids": "push",
                "headings": {"en": title, "es": title},
                "contents": {"en": message, "es": message},
                "data": data or {}
            }
            logger.info(f"Sending notification to {len(user_ids)} users: {title}")

            response = requests.post(
                self.base_url,
                headers=self.headers,
                data=json.dumps(payload),
                timeout=10
            )
            logger.debug(f"OneSignal response: {response.status_code} - {response.text}")

            if response.status_code == 200:
                result = response.json()
                return {
                    "success": True,
                    "notification_id": result.get("id"),
                    "recipients": result.get("recipients")
                }
            error_msg = f"OneSignal error: {response.status_code} - {response.text}"
            logger.error(error_msg)
            return {"success": False, "errors": [error_msg]}

        except Exception as e:
            error_msg = f"Error sending notification: {str(e)}"
            logger.error(error_msg, exc_info=True)
            return {"success": False, "errors": [error_msg]}


class NotificationDispatcher:
    """
    Guarda notificaciones en la bandeja del gimnasio o del usuario y las
    envía por push cuando hay destinatario. Un fallo nunca afecta a la
    operación que originó la notificación.
    """

    def __init__(self, push_service: OneSignalService):
        self.push_service = push_service

    def dispatch(
        self,
        db: Session,
        *,
        gym_id: int,
        type: str,
        title: str,
        message: str,
        related_id: Optional[int] = None,
        user_id: Optional[int] = None,
        priority: str = "medium"
    ) -> Optional[Notification]:
        try:
            notification = Notification(
                gym_id=gym_id,
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                related_id=related_id,
                priority=priority,
            )
            db.add(notification)
            db.commit()
            db.refresh(notification)
        except Exception as e:
            db.rollback()
            logger.error(f"Error guardando notificación '{type}' del gym {gym_id}: {e}", exc_info=True)
            return None

        if user_id is not None and self.push_service.enabled:
            try:
                result = self.push_service.send_to_users(
                    [str(user_id)], title, message,
                    data={"type": type, "related_id": related_id, "gym_id": gym_id}
                )
                if not result.get("success"):
                    logger.warning(f"Push no enviado al usuario {user_id}: {result.get('errors')}")
            except Exception as e:
                logger.error(f"Error enviando push al usuario {user_id}: {e}", exc_info=True)

        return notification

    def get_inbox(
        self, db: Session, *, gym_id: int, unread_only: bool = False, skip: int = 0, limit: int = 50
    ) -> List[Notification]:
        return notification_repository.get_for_gym(
            db, gym_id=gym_id, unread_only=unread_only, skip=skip, limit=limit
        )

    def mark_as_read(self, db: Session, *, notification_id: int, gym_id: int) -> Notification:
        notification = notification_repository.mark_as_read(db, notification_id=notification_id, gym_id=gym_id)
        if not notification:
            raise NotFoundError(f"Notificación {notification_id} no encontrada")
        return notification


_settings = get_settings()
if not _settings.ONESIGNAL_APP_ID or not _settings.ONESIGNAL_REST_API_KEY:
    logger.warning("OneSignal no configurado - las notificaciones push estarán deshabilitadas")

# Instancias globales
push_service = OneSignalService(
    app_id=_settings.ONESIGNAL_APP_ID,
    api_key=_settings.ONESIGNAL_REST_API_KEY
)
notification_dispatcher = NotificationDispatcher(push_service)
