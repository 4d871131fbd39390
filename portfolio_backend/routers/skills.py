from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import NotFoundError
from ..models.skill import Skill
from ..schemas.skill_schema import SkillCreate, SkillOut, SkillUpdate
from ..security import require_admin
from ..utils import envelope

router = APIRouter(prefix="/skills", tags=["skills"])


def _get_skill_or_404(db: Session, skill_id: int) -> Skill:
    skill = db.query(Skill).filter(Skill.id == skill_id).first()
    if not skill:
        raise NotFoundError("Skill not found")
    return skill


@router.get("")
@router.get("/", include_in_schema=False)
def list_skills(db: Session = Depends(get_db)):
    skills = (
        db.query(Skill)
        .order_by(Skill.category.asc(), Skill.order.asc(), Skill.id.asc())
        .all()
    )
    return envelope([SkillOut.model_validate(s).to_response() for s in skills])


@router.get("/{skill_id}")
def get_skill(skill_id: int, db: Session = Depends(get_db)):
    return envelope(SkillOut.model_validate(_get_skill_or_404(db, skill_id)).to_response())


@router.post("", dependencies=[Depends(require_admin)])
@router.post("/", dependencies=[Depends(require_admin)], include_in_schema=False)
def create_skill(payload: SkillCreate, db: Session = Depends(get_db)):
    skill = Skill(**payload.model_dump())
    db.add(skill)
    db.commit()
    db.refresh(skill)
    return JSONResponse(
        status_code=201,
        content=envelope(SkillOut.model_validate(skill).to_response(), "Skill created successfully"),
    )


@router.post("/{skill_id}/update", dependencies=[Depends(require_admin)])
def update_skill(skill_id: int, payload: SkillUpdate, db: Session = Depends(get_db)):
    skill = _get_skill_or_404(db, skill_id)

    data = payload.model_dump(exclude_unset=True)
    for key, value in data.items():
        if key == "icon" or value is not None:
            setattr(skill, key, value)

    db.add(skill)
    db.commit()
    db.refresh(skill)
    return envelope(SkillOut.model_validate(skill).to_response(), "Skill updated successfully")


@router.post("/{skill_id}/delete", dependencies=[Depends(require_admin)])
def delete_skill(skill_id: int, db: Session = Depends(get_db)):
    skill = _get_skill_or_404(db, skill_id)
    db.delete(skill)
    db.commit()
    return envelope(message="Skill deleted successfully")
