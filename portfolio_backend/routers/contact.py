from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import NotFoundError
from ..models.contact_message import ContactMessage
from ..schemas.contact_schema import ContactCreate, ContactOut
from ..security import require_admin
from ..services.email_service import send_contact_notification
from ..utils import envelope

router = APIRouter(prefix="/contact", tags=["contact"])


def _get_message_or_404(db: Session, message_id: int) -> ContactMessage:
    message = db.query(ContactMessage).filter(ContactMessage.id == message_id).first()
    if not message:
        raise NotFoundError("Contact message not found")
    return message


@router.post("")
@router.post("/", include_in_schema=False)
def submit_contact(
    form: ContactCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Guarda el mensaje y programa el email de aviso en segundo plano.
    Si el email falla, el mensaje ya quedó guardado y la respuesta no cambia.
    """
    message = ContactMessage(**form.model_dump())
    db.add(message)
    db.commit()
    db.refresh(message)

    background_tasks.add_task(send_contact_notification, form.model_dump())

    return JSONResponse(
        status_code=201,
        content=envelope(ContactOut.model_validate(message).to_response(), "Message sent successfully"),
    )


@router.get("", dependencies=[Depends(require_admin)])
@router.get("/", dependencies=[Depends(require_admin)], include_in_schema=False)
def list_messages(db: Session = Depends(get_db)):
    messages = (
        db.query(ContactMessage)
        .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
        .all()
    )
    return envelope([ContactOut.model_validate(m).to_response() for m in messages])


@router.get("/{message_id}", dependencies=[Depends(require_admin)])
def get_message(message_id: int, db: Session = Depends(get_db)):
    return envelope(ContactOut.model_validate(_get_message_or_404(db, message_id)).to_response())


@router.post("/{message_id}/read", dependencies=[Depends(require_admin)])
def mark_message_read(message_id: int, db: Session = Depends(get_db)):
    message = _get_message_or_404(db, message_id)
    message.read = True
    db.commit()
    db.refresh(message)
    return envelope(ContactOut.model_validate(message).to_response(), "Message marked as read")
