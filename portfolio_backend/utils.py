import math
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25
MAX_LIMIT = 100


def utcnow() -> datetime:
    """Fecha/hora actual en UTC, sin tzinfo (así la guardan las columnas DateTime)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def envelope(data: Any = None, message: Optional[str] = None) -> dict:
    """
    Sobre uniforme de respuesta exitosa.

    Ejemplos:
    - envelope({"count": 3}) -> {"success": True, "data": {"count": 3}}
    - envelope(message="Deleted") -> {"success": True, "message": "Deleted"}
    """
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return body


def normalize_pagination(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    """
    Normaliza page/limit recibidos por query string.

    - page < 1 o ausente -> 1
    - limit > 100 -> 100
    - limit < 1 o ausente -> 25
    """
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if limit is None or limit < 1:
        limit = DEFAULT_LIMIT
    elif limit > MAX_LIMIT:
        limit = MAX_LIMIT
    return page, limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
