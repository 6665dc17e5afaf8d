"""
Excepciones de dominio de GymTrialsAPI.

Los servicios lanzan estas excepciones y el manejador registrado en main.py
las convierte en la respuesta estándar {"success": False, "message": ...}.
"""

from typing import Any, Dict, Optional

from fastapi import status


class GymTrialsError(Exception):
    """Excepción base para todos los errores de negocio."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": False,
            "message": self.message,
            "code": self.code,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(GymTrialsError):
    """Campos obligatorios ausentes o mal formados."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(GymTrialsError):
    """Gimnasio, usuario, reserva o persona inexistente."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(GymTrialsError):
    """Registro duplicado (p. ej. miembro con el mismo email o teléfono)."""

    status_code = status.HTTP_409_CONFLICT


class LimitExceededError(GymTrialsError):
    """Cupo de pruebas agotado o espaciado mínimo entre pruebas no respetado."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        restrictions: Optional[Dict[str, Any]] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message, code=code)
        self.restrictions = restrictions or {}

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        body["restrictions"] = self.restrictions
        return body


class UnauthorizedError(GymTrialsError):
    """La identidad del solicitante no coincide con el propietario del recurso."""

    status_code = status.HTTP_403_FORBIDDEN


class AuthenticationError(GymTrialsError):
    """Falta la identidad del solicitante (cabecera X-User-ID)."""

    status_code = status.HTTP_401_UNAUTHORIZED
