import re
from datetime import datetime
from typing import List

from pydantic import Field, field_validator

from .base_schema import CamelModel

URL_PATTERN = re.compile(r"^https?://.+")


def _check_url(value: str | None) -> str | None:
    if value and not URL_PATTERN.match(value):
        raise ValueError("Invalid URL format")
    return value or None


def _check_tech_stack(value: List[str] | None) -> List[str] | None:
    if value is None:
        return value
    cleaned = [item.strip() for item in value if item and item.strip()]
    if not cleaned:
        raise ValueError("At least one technology must be specified")
    return cleaned


class ProjectBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    long_description: str | None = Field(default=None, max_length=2000)
    tech_stack: List[str]
    github_url: str | None = None
    live_url: str | None = None
    image_url: str | None = None
    featured: bool = False
    order: int = 0

    @field_validator("github_url", "live_url")
    @classmethod
    def validate_urls(cls, value):
        return _check_url(value)

    @field_validator("tech_stack")
    @classmethod
    def validate_tech_stack(cls, value):
        return _check_tech_stack(value)


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    long_description: str | None = Field(default=None, max_length=2000)
    tech_stack: List[str] | None = None
    github_url: str | None = None
    live_url: str | None = None
    image_url: str | None = None
    featured: bool | None = None
    order: int | None = None

    @field_validator("github_url", "live_url")
    @classmethod
    def validate_urls(cls, value):
        return _check_url(value)

    @field_validator("tech_stack")
    @classmethod
    def validate_tech_stack(cls, value):
        return _check_tech_stack(value)


class ProjectOut(ProjectBase):
    id: int
    created_at: datetime
    updated_at: datetime
