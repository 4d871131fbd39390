"""
Conteo de visitantes únicos.

Cada cliente se identifica por un hash de IP + User-Agent (no hay cookies
ni cuentas). Las visitas repetidas dentro de la ventana de una hora no
incrementan el contador.
"""
import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from fastapi import Request
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StoreUnavailableError
from ..models.visitor import Visitor
from ..utils import utcnow

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"
REVISIT_WINDOW = timedelta(hours=1)
DEFAULT_ID_LENGTH = 32

# Campos permitidos para ordenar el listado (nombre en la API -> columna)
SORT_FIELDS = {
    "visitorId": Visitor.visitor_id,
    "ipAddress": Visitor.ip_address,
    "lastVisit": Visitor.last_visit,
    "visitCount": Visitor.visit_count,
    "createdAt": Visitor.created_at,
}
DEFAULT_SORT_FIELD = "lastVisit"


@dataclass(frozen=True)
class ClientContext:
    ip: str
    user_agent: str


@dataclass
class VisitCounts:
    unique_visitors: int
    total_visits: int


@dataclass
class TrackResult:
    is_new_visitor: bool
    unique_visitors: int
    total_visits: int


@dataclass
class VisitorPage:
    records: List[Visitor]
    total_count: int


def client_context_from_request(request: Request) -> ClientContext:
    """
    Extrae IP y User-Agent de la request.
    Orden para la IP: primer valor de X-Forwarded-For, X-Real-IP,
    dirección del socket y por último "unknown".
    """
    headers = request.headers
    ip = ""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    if not ip:
        ip = (headers.get("x-real-ip") or "").strip()
    if not ip and request.client and request.client.host:
        ip = request.client.host
    user_agent = (headers.get("user-agent") or "").strip()
    return ClientContext(ip=ip or UNKNOWN, user_agent=user_agent or UNKNOWN)


class VisitorTracker:
    def __init__(
        self,
        db: Session,
        clock: Callable[[], datetime] = utcnow,
        id_length: int = DEFAULT_ID_LENGTH,
    ):
        if not 1 <= id_length <= 64:
            raise ValueError(f"id_length debe estar entre 1 y 64 (recibido: {id_length})")
        self.db = db
        self.clock = clock
        self.id_length = id_length

    def identify(self, ip_address: str, user_agent: str) -> str:
        """SHA-256 de "{ip}-{userAgent}" en hex, truncado a id_length."""
        ip_address = ip_address or UNKNOWN
        user_agent = user_agent or UNKNOWN
        digest = hashlib.sha256(f"{ip_address}-{user_agent}".encode("utf-8")).hexdigest()
        return digest[: self.id_length]

    def track_visit(self, ip_address: str, user_agent: str) -> TrackResult:
        """
        Registra una visita.

        - Visitante nuevo: se inserta con visit_count = 1.
        - Visitante conocido: se incrementa solo si la última visita fue
          hace más de una hora. El UPDATE es condicional, así que dos
          requests simultáneas incrementan como máximo una vez.
        """
        ip_address = ip_address or UNKNOWN
        user_agent = user_agent or UNKNOWN
        visitor_id = self.identify(ip_address, user_agent)
        now = self.clock()
        is_new_visitor = False

        try:
            existing = (
                self.db.query(Visitor.id)
                .filter(Visitor.visitor_id == visitor_id)
                .first()
            )
            if existing is None:
                is_new_visitor = self._insert(visitor_id, ip_address, user_agent, now)
            else:
                self._register_revisit(visitor_id, ip_address, user_agent, now)
            counts = self._counts()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error al registrar visita de {visitor_id[:8]}...: {e}", exc_info=True)
            raise StoreUnavailableError("Visitor store unavailable, please retry") from e

        return TrackResult(
            is_new_visitor=is_new_visitor,
            unique_visitors=counts.unique_visitors,
            total_visits=counts.total_visits,
        )

    def _insert(self, visitor_id: str, ip_address: str, user_agent: str, now: datetime) -> bool:
        visitor = Visitor(
            visitor_id=visitor_id,
            ip_address=ip_address,
            user_agent=user_agent,
            last_visit=now,
            visit_count=1,
            created_at=now,
            updated_at=now,
        )
        self.db.add(visitor)
        try:
            self.db.commit()
        except IntegrityError:
            # Otra request insertó el mismo visitante primero
            self.db.rollback()
            logger.info(f"Visitante {visitor_id[:8]}... ya insertado por otra request")
            return False
        logger.info(f"Nuevo visitante registrado: {visitor_id[:8]}...")
        return True

    def _register_revisit(self, visitor_id: str, ip_address: str, user_agent: str, now: datetime) -> None:
        updated = (
            self.db.query(Visitor)
            .filter(
                Visitor.visitor_id == visitor_id,
                Visitor.last_visit < now - REVISIT_WINDOW,
            )
            .update(
                {
                    Visitor.visit_count: Visitor.visit_count + 1,
                    Visitor.last_visit: now,
                    Visitor.ip_address: ip_address,
                    Visitor.user_agent: user_agent,
                    Visitor.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        if updated:
            logger.debug(f"Visita repetida contada para {visitor_id[:8]}...")

    def get_counts(self) -> VisitCounts:
        """Visitantes únicos y suma de visitas, calculados en cada llamada."""
        try:
            return self._counts()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error al contar visitantes: {e}", exc_info=True)
            raise StoreUnavailableError("Visitor store unavailable, please retry") from e

    def _counts(self) -> VisitCounts:
        unique_visitors, total_visits = self.db.query(
            func.count(Visitor.id),
            func.coalesce(func.sum(Visitor.visit_count), 0),
        ).one()
        return VisitCounts(unique_visitors=int(unique_visitors), total_visits=int(total_visits))

    def list_visitors(
        self,
        page: int = 1,
        page_size: int = 25,
        sort_field: Optional[str] = DEFAULT_SORT_FIELD,
        sort_direction: str = "desc",
    ) -> VisitorPage:
        """
        Página de visitantes. Un sort_field fuera de SORT_FIELDS no es un
        error: se ordena por lastVisit. El id desempata para que las páginas
        sean estables.
        """
        column = SORT_FIELDS.get(sort_field or "", SORT_FIELDS[DEFAULT_SORT_FIELD])
        if sort_direction == "asc":
            ordering = (column.asc(), Visitor.id.asc())
        else:
            ordering = (column.desc(), Visitor.id.desc())

        try:
            total = self.db.query(func.count(Visitor.id)).scalar() or 0
            records = (
                self.db.query(Visitor)
                .order_by(*ordering)
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error al listar visitantes: {e}", exc_info=True)
            raise StoreUnavailableError("Visitor store unavailable, please retry") from e

        return VisitorPage(records=records, total_count=int(total))
