from sqlalchemy import Column, Integer, String, DateTime, Index

from ..database import Base
from ..utils import utcnow

SKILL_CATEGORIES = ("frontend", "backend", "database", "devops", "tools", "other")


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    category = Column(String(20), nullable=False)
    proficiency = Column(Integer, nullable=False)  # 0-100
    icon = Column(String(255), nullable=True)
    order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_skills_category_order", "category", "order"),
    )
