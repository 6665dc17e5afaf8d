import os
from typing import Any, List, Optional, Union
from functools import lru_cache
import logging

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Configurar el logger
logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Permitir campos extra en .env
    )

    # Configuración básica
    API_V1_STR: str = "/api/v1"

    # Información del proyecto
    PROJECT_NAME: str = "GymTrialsAPI"
    PROJECT_DESCRIPTION: str = "API con FastAPI para reservas de prueba y asistencia de gimnasios"
    VERSION: str = "0.1.0"

    # Debug mode
    DEBUG_MODE: bool = os.getenv("DEBUG_MODE", "False").lower() in ("true", "1", "t")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode='before')
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./gymtrials.db")

    @field_validator("DATABASE_URL", mode="before")
    def ensure_proper_url_format(cls, v: Optional[str]) -> str:
        """Asegura que DATABASE_URL use el esquema postgresql:// que espera SQLAlchemy."""
        # No loguear el valor completo por seguridad
        if not v:
            logger.warning("DATABASE_URL no configurada, usando SQLite local")
            return "sqlite:///./gymtrials.db"
        if v.startswith('postgres://'):
            logger.info("Corrigiendo formato de postgres:// a postgresql://")
            return 'postgresql://' + v[len('postgres://'):]
        return v

    # Configuración de Redis (opcional: sin Redis se consulta directamente la BD)
    REDIS_URL: Optional[str] = os.getenv("REDIS_URL", None)
    REDIS_POOL_MAX_CONNECTIONS: int = int(os.getenv("REDIS_POOL_MAX_CONNECTIONS", "50"))
    REDIS_POOL_SOCKET_TIMEOUT: int = int(os.getenv("REDIS_POOL_SOCKET_TIMEOUT", "5"))
    REDIS_POOL_HEALTH_CHECK_INTERVAL: int = int(os.getenv("REDIS_POOL_HEALTH_CHECK_INTERVAL", "30"))

    @field_validator("REDIS_URL", mode="before")
    def clean_redis_url(cls, v: Optional[str]) -> Any:
        if isinstance(v, str):
            # Eliminar comentarios (todo lo que sigue a #)
            if '#' in v:
                v = v.split('#')[0]
            v = v.strip()
            return v or None
        return v

    CACHE_TTL_ATTENDANCE_STATS: int = 600  # 10 minutos

    # Reglas de pruebas gratuitas
    TRIAL_DEFAULT_TOTAL: int = int(os.getenv("TRIAL_DEFAULT_TOTAL", "3"))
    # Días mínimos entre dos pruebas en el mismo gimnasio (el gimnasio puede sobrescribirlo)
    TRIAL_RETRY_SPACING_DAYS: int = int(os.getenv("TRIAL_RETRY_SPACING_DAYS", "30"))

    # Asistencia
    # Día no laborable según datetime.weekday() (0=Lunes, 6=Domingo)
    ATTENDANCE_NON_WORKING_WEEKDAY: int = 6
    DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")

    @field_validator("ATTENDANCE_NON_WORKING_WEEKDAY")
    def validate_weekday(cls, v: int) -> int:
        if not 0 <= v <= 6:
            raise ValueError("ATTENDANCE_NON_WORKING_WEEKDAY debe estar entre 0 y 6")
        return v

    # Validaciones de pago en efectivo
    CASH_VALIDATION_TTL_SECONDS: int = int(os.getenv("CASH_VALIDATION_TTL_SECONDS", "120"))

    # Configuración de OneSignal para notificaciones push
    ONESIGNAL_APP_ID: Optional[str] = None
    ONESIGNAL_REST_API_KEY: Optional[str] = None

    # Rate limiting y tareas programadas
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "True").lower() in ("true", "1", "t")
    RATE_LIMIT_BOOKINGS: str = "20 per minute"
    SCHEDULER_ENABLED: bool = os.getenv("SCHEDULER_ENABLED", "True").lower() in ("true", "1", "t")

# Usar una función con caché para obtener la configuración
@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    logger.info("Configuración cargada correctamente")
    return settings
