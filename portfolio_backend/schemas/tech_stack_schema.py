from datetime import datetime

from pydantic import Field, field_validator

from .base_schema import CamelModel


class TechStackCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        # Se guarda en minúsculas para que la unicidad no dependa de mayúsculas
        return value.strip().lower()


class TechStackOut(CamelModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
