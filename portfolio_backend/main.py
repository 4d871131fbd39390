import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlalchemy import inspect

from .config import get_settings, clear_settings_cache
from .database import Base, engine
from .errors import register_exception_handlers
from .routers import (
    visitors,
    homepage_config,
    projects,
    skills,
    tech_stacks,
    contact,
    health,
)

# Importar todos los modelos para que SQLAlchemy los registre antes de create_all()
from . import models  # noqa: F401

# Configurar logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Cargar variables de entorno desde .env (solo en desarrollo local)
backend_dir = Path(__file__).parent.parent
env_path = backend_dir / ".env"
loaded = load_dotenv(dotenv_path=env_path)
if loaded:
    logger.info(f"Variables de entorno cargadas desde: {env_path}")
else:
    logger.info(f"No hay archivo .env en: {env_path}")

# Limpiar cache de settings para asegurar que se recarguen las variables
clear_settings_cache()


def create_tables(bind=engine):
    """Crea las tablas (e índices, incluido el índice único parcial) si no existen."""
    expected_tables = list(Base.metadata.tables.keys())
    logger.info(f"Tablas esperadas: {', '.join(expected_tables)}")

    Base.metadata.create_all(bind=bind)

    existing_tables = inspect(bind).get_table_names()
    missing_tables = [t for t in expected_tables if t not in existing_tables]
    if missing_tables:
        logger.warning(f"⚠️  Tablas faltantes: {', '.join(missing_tables)}")
    else:
        logger.info("✅ Todas las tablas fueron creadas/verificadas exitosamente")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.is_production and not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET debe estar configurado en producción")
    # Un VISITOR_ID_LENGTH inválido corta el arranque (ValueError)
    logger.info(f"Longitud de visitor_id: {settings.visitor_id_length}")

    try:
        create_tables()
    except Exception as e:
        logger.error(f"❌ Error al crear tablas al iniciar: {str(e)}", exc_info=True)
        logger.warning("⚠️ El servidor continuará iniciando, pero algunas funcionalidades pueden no estar disponibles")
    yield


def _allowed_origins(settings) -> list:
    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    # Permitir múltiples orígenes separados por coma
    for origin in settings.cors_origin.split(","):
        origin = origin.strip()
        if origin and origin not in allowed_origins:
            allowed_origins.append(origin)
    return allowed_origins


app_settings = get_settings()

app = FastAPI(
    title=app_settings.app_name,
    version=app_settings.version,
    redirect_slashes=False,
    lifespan=lifespan,
)

allowed_origins = _allowed_origins(app_settings)
logger.info(f"🌐 Orígenes CORS permitidos: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(visitors.router, prefix="/api")
app.include_router(homepage_config.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(skills.router, prefix="/api")
app.include_router(tech_stacks.router, prefix="/api")
app.include_router(contact.router, prefix="/api")
app.include_router(health.router, prefix="/api")


@app.get("/", tags=["root"])  # Simple welcome endpoint
async def root():
    return {"success": True, "message": f"{app_settings.app_name} is running"}


@app.get("/favicon.ico", tags=["static"])
async def favicon():
    """Handle favicon.ico requests - return 204 No Content"""
    return Response(status_code=204)
