"""
Utilidades para el manejo de zonas horarias en el sistema.
"""
from datetime import date, datetime, timezone
from typing import Optional
import pytz


def get_current_time_in_gym_timezone(gym_timezone: str) -> datetime:
    """
    Obtiene la hora actual en la zona horaria del gimnasio.

    Args:
        gym_timezone: Zona horaria del gimnasio (ej: 'America/Mexico_City')

    Returns:
        Datetime aware representando la hora actual en la zona horaria del gimnasio
    """
    utc_now = datetime.now(timezone.utc)
    try:
        tz = pytz.timezone(gym_timezone)
    except pytz.UnknownTimeZoneError:
        tz = pytz.utc
    return utc_now.astimezone(tz)


def get_gym_today(gym_timezone: Optional[str]) -> date:
    """Fecha local de "hoy" para el gimnasio; UTC si no hay zona configurada."""
    return get_current_time_in_gym_timezone(gym_timezone or "UTC").date()


def utcnow() -> datetime:
    """Datetime naive en UTC, el formato en el que se guardan las columnas DateTime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
