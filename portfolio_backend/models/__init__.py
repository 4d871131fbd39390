# Importar todos los modelos para que create_all() los registre
from .visitor import Visitor
from .homepage_config import HomepageConfig
from .project import Project
from .skill import Skill, SKILL_CATEGORIES
from .tech_stack import TechStack
from .contact_message import ContactMessage

__all__ = [
    "Visitor",
    "HomepageConfig",
    "Project",
    "Skill",
    "SKILL_CATEGORIES",
    "TechStack",
    "ContactMessage",
]
