from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Campos snake_case en Python, camelCase en el JSON que usa el frontend."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel
        str_strip_whitespace = True

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
