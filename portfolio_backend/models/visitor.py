from sqlalchemy import Column, Integer, String, DateTime, Index, CheckConstraint

from ..database import Base
from ..utils import utcnow


class Visitor(Base):
    """
    Visitante anónimo del sitio.
    visitor_id es el hash de IP + User-Agent; la restricción unique evita
    duplicados cuando dos requests simultáneas intentan insertar el mismo.
    """
    __tablename__ = "visitors"

    id = Column(Integer, primary_key=True, index=True)
    visitor_id = Column(String(64), unique=True, index=True, nullable=False)
    ip_address = Column(String(255), nullable=True)
    user_agent = Column(String(1000), nullable=True)
    last_visit = Column(DateTime, default=utcnow, nullable=False)
    visit_count = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("visit_count >= 1", name="ck_visitors_visit_count_positive"),
        Index("ix_visitors_last_visit", "last_visit"),
    )
