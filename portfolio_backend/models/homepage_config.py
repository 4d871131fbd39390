from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, Index, true

from ..database import Base
from ..utils import utcnow


class HomepageConfig(Base):
    """
    Configuración del home (secciones, orden, SEO, branding).
    Solo una puede estar activa: lo garantiza el índice único parcial
    sobre is_active, no el código de la aplicación.
    """
    __tablename__ = "homepage_configs"

    id = Column(Integer, primary_key=True, index=True)
    version = Column(String(20), default="1.0.0", nullable=False)
    sections = Column(JSON, nullable=False, default=dict)
    order = Column(JSON, nullable=False, default=list)
    seo = Column(JSON, nullable=True)
    branding = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index(
            "uq_homepage_configs_single_active",
            "is_active",
            unique=True,
            sqlite_where=is_active == true(),
            postgresql_where=is_active == true(),
        ),
    )
