"""
Configuraciones del home con una única configuración activa.

La unicidad la impone la base de datos (índice único parcial sobre
is_active) y cada "desactivar las demás + activar esta" se ejecuta en una
sola transacción. Si dos activaciones compiten, la perdedora hace rollback
y recibe un error reintentable en lugar de dejar dos (o ninguna) activas.
"""
import copy
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import true
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import ConflictError, NotFoundError, StoreUnavailableError, ValidationError
from ..models.homepage_config import HomepageConfig
from ..utils import utcnow

logger = logging.getLogger(__name__)

KNOWN_SECTIONS = ("hero", "about", "projects", "skills", "contact")
DEFAULT_ORDER = list(KNOWN_SECTIONS)
DEFAULT_VERSION = "1.0.0"

DEFAULT_SECTIONS: Dict[str, Dict[str, Any]] = {
    "hero": {
        "enabled": True,
        "badge": "<SoftwareEngineer />",
        "title": "Your Name",
        "subtitle": "",
        "description": (
            "Full-stack developer specializing in modern web technologies, building "
            "scalable applications with clean code and best practices."
        ),
        "primaryButton": {"text": "View Projects", "href": "#projects", "target": "_self"},
        "secondaryButton": {"text": "Get In Touch", "href": "#contact", "target": "_self"},
        "socialLinks": {},
        "showScrollIndicator": True,
    },
    "about": {
        "enabled": True,
        "title": "About Me",
        "description": (
            "I'm a passionate software engineer with expertise in full-stack development. "
            "I love building scalable applications that solve real-world problems."
        ),
        "professionalSummary": {
            "title": "Professional Summary",
            "content": (
                "Hands-on experience developing robust, scalable applications across "
                "frontend and backend technologies."
            ),
        },
        "features": [
            {
                "title": "Clean Code",
                "description": "Writing maintainable, scalable, and well-documented code.",
            },
            {
                "title": "Performance",
                "description": "Optimizing applications for speed and a great user experience.",
            },
            {
                "title": "Innovation",
                "description": "Staying current with new technologies and creative solutions.",
            },
        ],
    },
    "projects": {
        "enabled": True,
        "title": "Projects",
        "description": "A collection of projects showcasing my skills and experience in software development.",
    },
    "skills": {
        "enabled": True,
        "title": "Skills",
        "description": "Technologies and tools I work with to build applications.",
    },
    "contact": {
        "enabled": True,
        "title": "Get In Touch",
        "description": "Feel free to reach out for collaborations or just a friendly hello!",
        "showLinkedInFollowers": True,
    },
}

CONCURRENT_ACTIVATION_MESSAGE = "Another configuration was activated at the same time, please retry"


def default_sections() -> Dict[str, Dict[str, Any]]:
    return copy.deepcopy(DEFAULT_SECTIONS)


def validate_sections(sections: Optional[Dict[str, Any]]) -> None:
    """Solo se aceptan las secciones conocidas, cada una como objeto."""
    if sections is None:
        return
    if not isinstance(sections, dict):
        raise ValidationError("sections must be an object")

    invalid = [key for key in sections if key not in KNOWN_SECTIONS]
    if invalid:
        raise ValidationError(f"Invalid section IDs: {', '.join(invalid)}")

    for key, body in sections.items():
        if not isinstance(body, dict):
            raise ValidationError(f"Section '{key}' must be an object")
        if "enabled" in body and not isinstance(body["enabled"], bool):
            raise ValidationError(f"Section '{key}': enabled must be a boolean")


def validate_order(order: Optional[Iterable[str]]) -> None:
    """El orden no puede estar vacío, ni tener secciones desconocidas o repetidas."""
    if order is None:
        return
    order = list(order)
    if not order:
        raise ValidationError("At least one section must be specified in order")

    invalid = [name for name in order if name not in KNOWN_SECTIONS]
    if invalid:
        raise ValidationError(f"Invalid section IDs in order: {', '.join(invalid)}")

    duplicates = sorted({name for name in order if order.count(name) > 1})
    if duplicates:
        raise ValidationError(f"Duplicate section IDs in order: {', '.join(duplicates)}")


def merge_sections(current: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Mezcla campo a campo. Devuelve un dict nuevo para que SQLAlchemy detecte el cambio."""
    merged = copy.deepcopy(current or {})
    for key, body in updates.items():
        section = dict(merged.get(key) or {})
        section.update(copy.deepcopy(body))
        merged[key] = section
    return merged


class ActiveConfigStore:
    def __init__(self, db: Session):
        self.db = db

    # --- Lecturas ---

    def _find_active(self) -> Optional[HomepageConfig]:
        return (
            self.db.query(HomepageConfig)
            .filter(HomepageConfig.is_active == true())
            .first()
        )

    def get_active(self) -> HomepageConfig:
        """
        Devuelve la configuración activa. Si no hay ninguna, persiste la
        configuración por defecto como activa. Si otra request la crea al
        mismo tiempo, el índice único hace fallar nuestro insert y se
        devuelve la que ganó.
        """
        config = self._find_active()
        if config is not None:
            return config

        config = HomepageConfig(
            version=DEFAULT_VERSION,
            sections=default_sections(),
            order=list(DEFAULT_ORDER),
            is_active=True,
        )
        self.db.add(config)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            winner = self._find_active()
            if winner is None:
                raise ConflictError(CONCURRENT_ACTIVATION_MESSAGE)
            logger.info(f"Configuración por defecto creada por otra request (id={winner.id})")
            return winner
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error al crear la configuración por defecto: {e}", exc_info=True)
            raise StoreUnavailableError() from e

        self.db.refresh(config)
        logger.info(f"✅ Configuración por defecto del home creada (id={config.id})")
        return config

    def list_all(self) -> List[HomepageConfig]:
        return (
            self.db.query(HomepageConfig)
            .order_by(HomepageConfig.created_at.desc(), HomepageConfig.id.desc())
            .all()
        )

    def get(self, config_id: int) -> HomepageConfig:
        config = self.db.query(HomepageConfig).filter(HomepageConfig.id == config_id).first()
        if config is None:
            raise NotFoundError("Homepage configuration not found")
        return config

    # --- Escrituras ---

    def create(self, data: Dict[str, Any]) -> HomepageConfig:
        """
        Crea una configuración. Las secciones enviadas se mezclan sobre las
        secciones por defecto. Sin is_active, se crea inactiva.
        """
        validate_sections(data.get("sections"))
        validate_order(data.get("order"))

        config = HomepageConfig(
            version=data.get("version") or DEFAULT_VERSION,
            sections=merge_sections(default_sections(), data.get("sections") or {}),
            order=list(data.get("order") or DEFAULT_ORDER),
            seo=data.get("seo"),
            branding=data.get("branding"),
            is_active=bool(data.get("is_active")),
        )
        if config.is_active:
            self._deactivate_others()
        self.db.add(config)
        self._commit()
        self.db.refresh(config)
        logger.info(f"Configuración del home creada (id={config.id}, activa={config.is_active})")
        return config

    def update(self, config_id: int, data: Dict[str, Any]) -> HomepageConfig:
        config = self.get(config_id)

        # Validar todo antes de tocar la base
        validate_sections(data.get("sections"))
        validate_order(data.get("order"))
        if data.get("is_active") is False and config.is_active:
            raise ValidationError(
                "The active configuration cannot be deactivated directly. "
                "Activate a different configuration instead."
            )

        if data.get("sections") is not None:
            config.sections = merge_sections(config.sections, data["sections"])
        if data.get("order") is not None:
            config.order = list(data["order"])
        if data.get("version"):
            config.version = data["version"]
        for field in ("seo", "branding"):
            if field in data:
                setattr(config, field, data[field])

        if data.get("is_active") is True and not config.is_active:
            self._deactivate_others(exclude_id=config.id)
            config.is_active = True

        config.updated_at = utcnow()
        self._commit()
        self.db.refresh(config)
        return config

    def activate(self, config_id: int) -> HomepageConfig:
        """Desactiva todas las demás y activa esta, en una sola transacción."""
        config = self.get(config_id)
        self._deactivate_others(exclude_id=config.id)
        config.is_active = True
        config.updated_at = utcnow()
        self._commit()
        self.db.refresh(config)
        logger.info(f"Configuración del home activada (id={config.id})")
        return config

    def delete(self, config_id: int) -> None:
        config = self.get(config_id)
        if config.is_active:
            raise ConflictError(
                "Cannot delete the active configuration. "
                "Activate a different configuration before deleting this one."
            )
        self.db.delete(config)
        self._commit()
        logger.info(f"Configuración del home eliminada (id={config_id})")

    def _deactivate_others(self, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(HomepageConfig).filter(HomepageConfig.is_active == true())
        if exclude_id is not None:
            query = query.filter(HomepageConfig.id != exclude_id)
        try:
            query.update(
                {HomepageConfig.is_active: False, HomepageConfig.updated_at: utcnow()},
                synchronize_session=False,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error al desactivar configuraciones: {e}", exc_info=True)
            raise StoreUnavailableError() from e

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Activación concurrente rechazada por el índice único: {e.orig}")
            raise ConflictError(CONCURRENT_ACTIVATION_MESSAGE) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error al guardar la configuración del home: {e}", exc_info=True)
            raise StoreUnavailableError() from e
