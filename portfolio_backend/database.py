# Configuración de base de datos usando SQLAlchemy.
#
# ESTRATEGIA DE BASE DE DATOS:
# - DESARROLLO LOCAL: SQLite local (portfolio.db) por defecto
# - PRODUCCIÓN: PostgreSQL, solo si DATABASE_URL está configurada
#
# El engine se construye con build_engine() para que los tests puedan crear
# el suyo (SQLite en memoria) y sobreescribir get_db.

import logging
from pathlib import Path
from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import get_settings

logger = logging.getLogger(__name__)

# Cargar variables de entorno desde .env (solo en desarrollo local)
backend_dir = Path(__file__).parent.parent
env_path = backend_dir / ".env"
load_dotenv(dotenv_path=env_path)

Base = declarative_base()


def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(url: str, timeout_seconds: int = 10, **kwargs) -> Engine:
    """
    Crea un engine de SQLAlchemy.

    El timeout se propaga al motor: busy timeout en SQLite y
    statement_timeout en PostgreSQL, para que ninguna request quede
    bloqueada más allá de la llamada al almacenamiento.
    """
    if is_sqlite_url(url):
        connect_args = {"check_same_thread": False, "timeout": timeout_seconds}
    else:
        connect_args = {"options": f"-c statement_timeout={timeout_seconds * 1000}"}
    return create_engine(url, connect_args=connect_args, **kwargs)


settings = get_settings()
DATABASE_URL = settings.database_url
IS_POSTGRES = not is_sqlite_url(DATABASE_URL)

if IS_POSTGRES:
    logger.info("[INFO] Usando PostgreSQL externa (DATABASE_URL configurada)")
else:
    logger.info(f"[INFO] Usando SQLite local: {DATABASE_URL}")

engine = build_engine(DATABASE_URL, timeout_seconds=settings.db_timeout_seconds)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def ping(bind: Engine) -> bool:
    """Verifica que la base de datos responda."""
    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"[WARN] La base de datos no responde: {e}")
        return False


def get_db():
  """
  Dependencia para inyectar la sesión de DB en los endpoints de FastAPI.
  """
  db = SessionLocal()
  try:
      yield db
  finally:
      db.close()
