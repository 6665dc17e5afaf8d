from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.exc import OperationalError, DBAPIError
from datetime import timezone
from functools import wraps
import logging
import time

from gymtrials.db.session import SessionLocal
from gymtrials.services.cash_validation import cash_validation_service

logger = logging.getLogger(__name__)

# Variable global para mantener referencia al scheduler
_scheduler = None


def retry_on_db_error(max_retries=3, delay=2):
    """
    Decorator para reintentar operaciones en caso de errores de BD.

    Args:
        max_retries: Número máximo de reintentos (default: 3)
        delay: Tiempo base de espera entre reintentos en segundos (default: 2)
               Se aplica backoff lineal: delay * (attempt + 1)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except (OperationalError, DBAPIError) as e:
                    if attempt < max_retries - 1:
                        wait_time = delay * (attempt + 1)
                        logger.warning(
                            f"DB error in {func.__name__}, retry {attempt + 1}/{max_retries} "
                            f"after {wait_time}s: {str(e)}"
                        )
                        time.sleep(wait_time)
                    else:
                        logger.error(
                            f"Max retries ({max_retries}) reached for {func.__name__}: {str(e)}",
                            exc_info=True
                        )
                        raise
        return wrapper
    return decorator


@retry_on_db_error(max_retries=3, delay=2)
def expire_cash_validations():
    """
    Marca como expiradas las validaciones de efectivo vencidas.
    """
    logger.info("Running scheduled task: expire_cash_validations")
    db = SessionLocal()
    try:
        return cash_validation_service.expire_stale_validations(db)
    finally:
        db.close()


def init_scheduler():
    """
    Inicializa el programador de tareas
    """
    global _scheduler

    logger.info("Initializing scheduler with UTC timezone")
    _scheduler = AsyncIOScheduler(timezone=timezone.utc)

    # Barrido de validaciones de efectivo cada minuto
    _scheduler.add_job(
        expire_cash_validations,
        trigger=CronTrigger(minute='*'),
        id='cash_validation_expiry',
        replace_existing=True
    )

    _scheduler.start()
    logger.info("Scheduler started with UTC timezone")
    return _scheduler


def get_scheduler():
    global _scheduler
    return _scheduler
