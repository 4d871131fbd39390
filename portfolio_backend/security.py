"""
Verificación de tokens JWT para las rutas de administración.

El backend no emite sesiones: solo valida el bearer token y lee el claim
"role". create_access_token existe para scripts de operación y tests.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request

from .config import get_settings
from .errors import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
DEFAULT_TOKEN_EXPIRE = timedelta(days=7)


def create_access_token(
    subject: str,
    role: str = ADMIN_ROLE,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Firma un token de acceso.

    Args:
        subject: Identificador del usuario (claim "id")
        role: Rol del usuario ("admin" para el panel)
        expires_delta: Duración del token (7 días por defecto)
        additional_claims: Claims extra, por ejemplo "email"

    Returns:
        Token JWT codificado
    """
    settings = get_settings()
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET no está configurado")

    now = datetime.now(timezone.utc)
    payload = {
        "id": str(subject),
        "role": role,
        "iat": now,
        "exp": now + (expires_delta or DEFAULT_TOKEN_EXPIRE),
        "jti": secrets.token_hex(16),
    }
    if additional_claims:
        payload.update(additional_claims)

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """Valida firma y expiración. Cualquier fallo es UnauthorizedError."""
    settings = get_settings()
    if not settings.jwt_secret:
        logger.error("JWT_SECRET no configurado, se rechazan todos los tokens")
        raise UnauthorizedError("Invalid or expired token")

    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Token expirado")
        raise UnauthorizedError("Invalid or expired token")
    except jwt.InvalidTokenError as e:
        logger.info(f"Token inválido: {e}")
        raise UnauthorizedError("Invalid or expired token")


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(request: Request) -> Dict[str, Any]:
    """Dependencia: claims del token enviado en Authorization: Bearer <token>."""
    token = _bearer_token(request)
    if not token:
        raise UnauthorizedError("No token provided")
    return decode_token(token)


def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """Dependencia para rutas de administración."""
    if user.get("role") != ADMIN_ROLE:
        raise ForbiddenError("Admin access required")
    return user
