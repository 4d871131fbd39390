from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import NotFoundError
from ..models.project import Project
from ..schemas.project_schema import ProjectCreate, ProjectOut, ProjectUpdate
from ..security import require_admin
from ..utils import envelope

router = APIRouter(prefix="/projects", tags=["projects"])


def _get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    return project


@router.get("")
@router.get("/", include_in_schema=False)
def list_projects(db: Session = Depends(get_db)):
    """
    Listado público de proyectos: primero por "order" y luego los más nuevos.
    """
    projects = (
        db.query(Project)
        .order_by(Project.order.asc(), Project.created_at.desc(), Project.id.desc())
        .all()
    )
    return envelope([ProjectOut.model_validate(p).to_response() for p in projects])


@router.get("/{project_id}")
def get_project(project_id: int, db: Session = Depends(get_db)):
    project = _get_project_or_404(db, project_id)
    return envelope(ProjectOut.model_validate(project).to_response())


@router.post("", dependencies=[Depends(require_admin)])
@router.post("/", dependencies=[Depends(require_admin)], include_in_schema=False)
def create_project(payload: ProjectCreate, db: Session = Depends(get_db)):
    project = Project(**payload.model_dump())
    db.add(project)
    db.commit()
    db.refresh(project)
    return JSONResponse(
        status_code=201,
        content=envelope(ProjectOut.model_validate(project).to_response(), "Project created successfully"),
    )


@router.post("/{project_id}/update", dependencies=[Depends(require_admin)])
def update_project(project_id: int, payload: ProjectUpdate, db: Session = Depends(get_db)):
    """
    Actualización parcial: solo se tocan los campos enviados.
    title, description y techStack no se pueden vaciar.
    """
    project = _get_project_or_404(db, project_id)

    data = payload.model_dump(exclude_unset=True)
    # Campos que pueden quedar en null explícito
    nullable_fields = {"long_description", "github_url", "live_url", "image_url"}

    for key, value in data.items():
        if key in nullable_fields or value is not None:
            setattr(project, key, value)

    db.add(project)
    db.commit()
    db.refresh(project)
    return envelope(ProjectOut.model_validate(project).to_response(), "Project updated successfully")


@router.post("/{project_id}/delete", dependencies=[Depends(require_admin)])
def delete_project(project_id: int, db: Session = Depends(get_db)):
    project = _get_project_or_404(db, project_id)
    db.delete(project)
    db.commit()
    return envelope(message="Project deleted successfully")
