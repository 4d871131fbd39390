from sqlalchemy import Column, Integer, String, DateTime

from ..database import Base
from ..utils import utcnow


class TechStack(Base):
    """Tecnologías sugeridas en el formulario de proyectos. name se guarda en minúsculas."""
    __tablename__ = "tech_stacks"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
