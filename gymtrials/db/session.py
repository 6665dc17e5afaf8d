from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
import logging

from gymtrials.core.config import get_settings

logger = logging.getLogger(__name__)

settings_instance = get_settings()
db_url = str(settings_instance.DATABASE_URL)

# Ocultar credenciales en el log
display_url = db_url
if '@' in display_url:
    scheme = display_url.split('://')[0]
    display_url = f"{scheme}://***@{display_url.split('@', 1)[1]}"

if db_url.startswith("sqlite"):
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=180,
        connect_args={
            "connect_timeout": 10,
            "options": "-c statement_timeout=30000",
        },
        execution_options={
            "isolation_level": "READ COMMITTED",
        }
    )

logger.info(f"Engine de base de datos creado: {display_url}")

# Crear clase de sesión
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependencia FastAPI que entrega una sesión por request y la cierra al final.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
