"""
Rate limiting con slowapi.

Se aplica a los endpoints públicos de creación (reservas y validaciones de
efectivo). Usa Redis como almacenamiento si está configurado y memoria local
en otro caso.
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from gymtrials.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

if settings.REDIS_URL:
    limiter = Limiter(
        key_func=get_remote_address,
        storage_uri=settings.REDIS_URL,
        enabled=settings.RATE_LIMIT_ENABLED
    )
    logger.info("Rate limiting configurado con backend Redis")
else:
    # Memoria local (solo para desarrollo o una única instancia)
    limiter = Limiter(
        key_func=get_remote_address,
        enabled=settings.RATE_LIMIT_ENABLED
    )
    logger.warning("Rate limiting usando memoria local")

RATE_LIMITS = {
    "bookings": settings.RATE_LIMIT_BOOKINGS,
    "cash_validation": "10 per minute",
}


def custom_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handler para rate limit exceeded con el formato de error de la API"""
    client = get_remote_address(request)
    logger.warning(f"Rate limit exceeded para {client} en {request.url.path} - Límite: {exc.detail}")
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Demasiadas solicitudes. Intenta nuevamente más tarde.",
            "code": "RateLimitExceeded",
            "limit": str(exc.detail),
        }
    )
