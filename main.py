import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from gymtrials.core.logging_config import setup_logging

# Llamar a la configuración de logging ANTES de importar/crear otros elementos
setup_logging()

from gymtrials.api.v1.api import api_router
from gymtrials.core.config import get_settings
from gymtrials.core.exceptions import GymTrialsError
from gymtrials.core.scheduler import init_scheduler
from gymtrials.db.redis_client import initialize_redis_pool, close_redis_client
from gymtrials.middleware.rate_limit import limiter, custom_rate_limit_exceeded_handler
from gymtrials.middleware.timing import TimingMiddleware
from slowapi.errors import RateLimitExceeded

logger = logging.getLogger(__name__)

settings_instance = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Lifespan: Startup iniciado...")

    if settings_instance.SCHEDULER_ENABLED:
        try:
            app.state.scheduler = init_scheduler()
            logger.info("Lifespan: Scheduler inicializado.")
        except Exception as e:
            logger.error(f"Lifespan: Error al inicializar scheduler: {e}", exc_info=True)

    pool = await initialize_redis_pool()
    logger.info(f"Lifespan: Redis {'disponible' if pool else 'no disponible, caché deshabilitada'}.")

    yield  # Aplicación en ejecución

    logger.info("Lifespan: Shutdown iniciado...")

    scheduler = getattr(app.state, "scheduler", None)
    if scheduler:
        try:
            scheduler.shutdown()
            logger.info("Scheduler shut down.")
        except Exception as e:
            logger.error(f"Error shutting down scheduler: {e}", exc_info=True)

    try:
        await close_redis_client()
    except Exception as e:
        logger.error(f"Lifespan: Error cerrando Redis connection pool: {e}", exc_info=True)


app = FastAPI(
    title=settings_instance.PROJECT_NAME,
    description=settings_instance.PROJECT_DESCRIPTION,
    version=settings_instance.VERSION,
    openapi_url=f"{settings_instance.API_V1_STR}/openapi.json",
    docs_url=f"{settings_instance.API_V1_STR}/docs",
    redoc_url=f"{settings_instance.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Configurar rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, custom_rate_limit_exceeded_handler)


@app.exception_handler(GymTrialsError)
async def gymtrials_error_handler(request: Request, exc: GymTrialsError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_response()))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({
            "success": False,
            "message": "Faltan campos obligatorios o tienen un formato inválido",
            "code": "RequestValidationError",
            "errors": exc.errors(),
        }),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Error no controlado en {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Error interno del servidor", "code": "InternalError"},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"Middleware: Recibida petición: {request.method} {request.url.path}")
    if settings_instance.DEBUG_MODE:
        logger.debug(
            f"Middleware: X-User-ID={request.headers.get('x-user-id')} "
            f"X-Gym-ID={request.headers.get('x-gym-id')}"
        )
    response = await call_next(request)
    logger.info(f"Middleware: Enviando respuesta: {response.status_code}")
    return response


# Añadir middleware para medir el tiempo de respuesta
app.add_middleware(TimingMiddleware)

# Lista de orígenes permitidos para CORS
origins = [str(origin).rstrip("/") for origin in settings_instance.BACKEND_CORS_ORIGINS]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time"],
    max_age=86400,  # 24 horas en segundos
)

# Incluir routers
app.include_router(api_router, prefix=settings_instance.API_V1_STR)


@app.get("/")
def root():
    return {
        "message": "Bienvenido a GymTrialsAPI",
        "docs": f"{settings_instance.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings_instance.DEBUG_MODE)
