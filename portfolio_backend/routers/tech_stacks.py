from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import ConflictError, NotFoundError
from ..models.tech_stack import TechStack
from ..schemas.tech_stack_schema import TechStackCreate, TechStackOut
from ..security import require_admin
from ..utils import envelope

router = APIRouter(prefix="/tech-stacks", tags=["tech-stacks"])

SEARCH_LIMIT = 20


@router.get("")
@router.get("/", include_in_schema=False)
def search_tech_stacks(
    q: Optional[str] = Query(default=None, description="Texto a buscar (sin distinguir mayúsculas)"),
    db: Session = Depends(get_db),
):
    """
    Autocompletado de tecnologías para el formulario de proyectos.
    """
    query = db.query(TechStack)
    if q and q.strip():
        # "%" y "_" del usuario se buscan literalmente
        term = q.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        query = query.filter(TechStack.name.like(f"%{term}%", escape="\\"))
    stacks = query.order_by(TechStack.name.asc()).limit(SEARCH_LIMIT).all()
    return envelope([TechStackOut.model_validate(s).to_response() for s in stacks])


@router.post("", dependencies=[Depends(require_admin)])
@router.post("/", dependencies=[Depends(require_admin)], include_in_schema=False)
def create_tech_stack(payload: TechStackCreate, db: Session = Depends(get_db)):
    existing = db.query(TechStack).filter(TechStack.name == payload.name).first()
    if existing:
        raise ConflictError(f'Tech stack "{payload.name}" already exists')

    stack = TechStack(name=payload.name)
    db.add(stack)
    try:
        db.commit()
    except IntegrityError:
        # Otro admin la creó entre el SELECT y el INSERT
        db.rollback()
        raise ConflictError(f'Tech stack "{payload.name}" already exists')
    db.refresh(stack)
    return JSONResponse(
        status_code=201,
        content=envelope(TechStackOut.model_validate(stack).to_response(), "Tech stack created successfully"),
    )


@router.post("/{stack_id}/delete", dependencies=[Depends(require_admin)])
def delete_tech_stack(stack_id: int, db: Session = Depends(get_db)):
    stack = db.query(TechStack).filter(TechStack.id == stack_id).first()
    if not stack:
        raise NotFoundError("Tech stack not found")
    db.delete(stack)
    db.commit()
    return envelope(message="Tech stack deleted successfully")
