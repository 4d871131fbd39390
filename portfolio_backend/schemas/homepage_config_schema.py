from datetime import datetime
from typing import Any, Dict, List

from .base_schema import CamelModel


class SeoConfig(CamelModel):
    title: str | None = None
    description: str | None = None
    keywords: List[str] | None = None
    og_image: str | None = None


class BrandingConfig(CamelModel):
    logo: str | None = None  # URL o data URL en base64
    favicon: str | None = None


class HomepageConfigWrite(CamelModel):
    # sections se valida en el servicio para responder con las claves inválidas
    version: str | None = None
    sections: Dict[str, Any] | None = None
    order: List[str] | None = None
    seo: SeoConfig | None = None
    branding: BrandingConfig | None = None
    is_active: bool | None = None

    def to_store_data(self) -> dict:
        """Solo los campos enviados; seo/branding se guardan en camelCase."""
        data = self.model_dump(exclude_unset=True)
        for field in ("seo", "branding"):
            value = getattr(self, field)
            if field in data:
                data[field] = value.model_dump(by_alias=True, exclude_none=True) if value else None
        return data


class HomepageConfigCreate(HomepageConfigWrite):
    pass


class HomepageConfigUpdate(HomepageConfigWrite):
    pass


class HomepageConfigOut(CamelModel):
    id: int
    version: str
    sections: Dict[str, Any]
    order: List[str]
    seo: Dict[str, Any] | None = None
    branding: Dict[str, Any] | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
