"""
Identidad del solicitante.

La autenticación la resuelve el gateway, que reenvía el ID del usuario en el
header X-User-ID. Aquí solo se traduce ese ID a un User.
"""

from fastapi import Header, Depends
from sqlalchemy.orm import Session
from typing import Optional
import logging

from gymtrials.core.exceptions import AuthenticationError, NotFoundError
from gymtrials.db.session import get_db
from gymtrials.models.user import User
from gymtrials.repositories.user import user_repository

logger = logging.getLogger(__name__)


async def get_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-ID")
) -> Optional[int]:
    if not x_user_id:
        return None
    try:
        return int(x_user_id)
    except (ValueError, TypeError):
        logger.warning(f"Formato inválido para X-User-ID: {x_user_id}")
        raise AuthenticationError("Header X-User-ID inválido", code="InvalidIdentity")


async def get_optional_user(
    db: Session = Depends(get_db),
    user_id: Optional[int] = Depends(get_user_id)
) -> Optional[User]:
    """Usuario del request o None para peticiones anónimas."""
    if user_id is None:
        return None
    user = user_repository.get(db, id=user_id)
    if not user:
        raise NotFoundError(f"Usuario {user_id} no encontrado")
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user)
) -> User:
    if user is None:
        raise AuthenticationError("Se requiere el header X-User-ID", code="MissingIdentity")
    return user
