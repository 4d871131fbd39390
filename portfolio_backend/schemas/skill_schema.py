from datetime import datetime
from typing import Literal

from pydantic import Field

from ..models.skill import SKILL_CATEGORIES
from .base_schema import CamelModel

SkillCategory = Literal[SKILL_CATEGORIES]


class SkillBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    category: SkillCategory
    proficiency: int = Field(..., ge=0, le=100)
    icon: str | None = None
    order: int = 0


class SkillCreate(SkillBase):
    pass


class SkillUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    category: SkillCategory | None = None
    proficiency: int | None = Field(default=None, ge=0, le=100)
    icon: str | None = None
    order: int | None = None


class SkillOut(SkillBase):
    id: int
    created_at: datetime
    updated_at: datetime
