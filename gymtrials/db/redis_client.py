"""
Cliente Redis con Connection Pooling.

Redis es opcional: se usa como caché de estadísticas de asistencia. Si no hay
REDIS_URL configurada o el pool no puede crearse, las dependencias devuelven
None y los servicios consultan directamente la base de datos.

Para usar en endpoints:
```python
@router.get("/stats")
async def stats(redis_client: Optional[Redis] = Depends(get_redis_client)):
    ...
```
"""

from typing import Optional

from redis.asyncio import ConnectionPool, Redis
import logging

from gymtrials.core.config import get_settings

logger = logging.getLogger(__name__)

# Declaración global del pool de conexiones
REDIS_POOL: Optional[ConnectionPool] = None


async def initialize_redis_pool() -> Optional[ConnectionPool]:
    """
    Inicializa el pool de conexiones a Redis.
    Debe llamarse una sola vez al iniciar la aplicación.
    """
    global REDIS_POOL
    if REDIS_POOL is None:
        settings = get_settings()
        if not settings.REDIS_URL:
            logger.warning("REDIS_URL no configurada, caché deshabilitada")
            return None
        try:
            REDIS_POOL = ConnectionPool.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                max_connections=settings.REDIS_POOL_MAX_CONNECTIONS,
                socket_timeout=settings.REDIS_POOL_SOCKET_TIMEOUT,
                health_check_interval=settings.REDIS_POOL_HEALTH_CHECK_INTERVAL,
            )
            logger.info(
                f"Connection pool de Redis inicializado (max_connections={settings.REDIS_POOL_MAX_CONNECTIONS})."
            )
        except Exception as e:
            logger.error(f"Error al inicializar connection pool de Redis: {e}", exc_info=True)
            REDIS_POOL = None
    return REDIS_POOL


async def get_redis_client():
    """
    Dependencia FastAPI para obtener un cliente Redis por request.

    Crea un cliente NUEVO por request sobre el pool compartido y lo cierra al
    terminar para devolver la conexión al pool. Entrega None si Redis no está
    disponible.
    """
    pool = await initialize_redis_pool()
    if pool is None:
        yield None
        return

    client = Redis(connection_pool=pool)
    try:
        yield client
    finally:
        try:
            await client.close()
        except Exception as e:
            logger.warning(f"Error cerrando cliente Redis: {e}")


async def close_redis_client() -> None:
    """Cierra el pool de conexiones (shutdown de la aplicación)."""
    global REDIS_POOL
    if REDIS_POOL is not None:
        await REDIS_POOL.disconnect()
        REDIS_POOL = None
        logger.info("Connection pool de Redis cerrado.")
