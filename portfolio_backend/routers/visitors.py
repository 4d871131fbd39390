from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..schemas.visitor_schema import TrackVisitOut, VisitorCountOut, VisitorListOut, VisitorOut
from ..security import require_admin
from ..services.visitor_tracker import (
    DEFAULT_SORT_FIELD,
    VisitorTracker,
    client_context_from_request,
)
from ..utils import DEFAULT_LIMIT, envelope, normalize_pagination, total_pages

router = APIRouter(prefix="/visitors", tags=["visitors"])


def get_visitor_tracker(db: Session = Depends(get_db)) -> VisitorTracker:
    return VisitorTracker(db, id_length=get_settings().visitor_id_length)


@router.post("/track")
def track_visit(request: Request, tracker: VisitorTracker = Depends(get_visitor_tracker)):
    """
    Registra la visita del cliente que hace la request.
    No lleva body: la identidad sale de la IP y el User-Agent.
    """
    context = client_context_from_request(request)
    result = tracker.track_visit(context.ip, context.user_agent)
    return envelope(TrackVisitOut.model_validate(result).to_response(), "Visit tracked successfully")


@router.get("/count")
def get_visitor_count(tracker: VisitorTracker = Depends(get_visitor_tracker)):
    counts = tracker.get_counts()
    return envelope(VisitorCountOut.model_validate(counts).to_response(), "Visitor count retrieved successfully")


@router.get("", dependencies=[Depends(require_admin)])
@router.get("/", dependencies=[Depends(require_admin)], include_in_schema=False)
def list_visitors(
    page: int = Query(default=1),
    limit: int = Query(default=DEFAULT_LIMIT),
    sort_by: str = Query(default=DEFAULT_SORT_FIELD, alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    tracker: VisitorTracker = Depends(get_visitor_tracker),
):
    """
    Listado paginado para el panel de administración.
    - limit > 100 se recorta a 100; limit < 1 vuelve a 25
    - sortBy fuera de la lista permitida ordena por lastVisit
    """
    page, limit = normalize_pagination(page, limit)
    direction = "asc" if sort_order == "asc" else "desc"
    result = tracker.list_visitors(page, limit, sort_by, direction)

    payload = VisitorListOut(
        visitors=[VisitorOut.model_validate(v) for v in result.records],
        total=result.total_count,
        total_pages=total_pages(result.total_count, limit),
        current_page=page,
    )
    return envelope(payload.to_response(), "Visitors retrieved successfully")
