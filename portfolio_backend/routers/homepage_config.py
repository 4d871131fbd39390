from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.homepage_config_schema import (
    HomepageConfigCreate,
    HomepageConfigOut,
    HomepageConfigUpdate,
)
from ..security import require_admin
from ..services.homepage_config_store import ActiveConfigStore
from ..utils import envelope

router = APIRouter(prefix="/homepage-config", tags=["homepage-config"])


def get_config_store(db: Session = Depends(get_db)) -> ActiveConfigStore:
    return ActiveConfigStore(db)


def _out(config) -> dict:
    return HomepageConfigOut.model_validate(config).to_response()


@router.get("")
@router.get("/", include_in_schema=False)
def get_active_config(store: ActiveConfigStore = Depends(get_config_store)):
    """
    Endpoint público: configuración activa del home.
    En una instalación nueva crea y devuelve la configuración por defecto.
    """
    return envelope(_out(store.get_active()))


@router.get("/all", dependencies=[Depends(require_admin)])
def list_configs(store: ActiveConfigStore = Depends(get_config_store)):
    return envelope([_out(config) for config in store.list_all()])


@router.get("/{config_id}", dependencies=[Depends(require_admin)])
def get_config(config_id: int, store: ActiveConfigStore = Depends(get_config_store)):
    return envelope(_out(store.get(config_id)))


@router.post("", dependencies=[Depends(require_admin)])
@router.post("/", dependencies=[Depends(require_admin)], include_in_schema=False)
def create_config(
    payload: HomepageConfigCreate,
    store: ActiveConfigStore = Depends(get_config_store),
):
    config = store.create(payload.to_store_data())
    return JSONResponse(
        status_code=201,
        content=envelope(_out(config), "Homepage configuration created successfully"),
    )


@router.post("/{config_id}/update", dependencies=[Depends(require_admin)])
def update_config(
    config_id: int,
    payload: HomepageConfigUpdate,
    store: ActiveConfigStore = Depends(get_config_store),
):
    config = store.update(config_id, payload.to_store_data())
    return envelope(_out(config), "Homepage configuration updated successfully")


@router.post("/{config_id}/delete", dependencies=[Depends(require_admin)])
def delete_config(config_id: int, store: ActiveConfigStore = Depends(get_config_store)):
    store.delete(config_id)
    return envelope(message="Homepage configuration deleted successfully")


@router.post("/{config_id}/activate", dependencies=[Depends(require_admin)])
def activate_config(config_id: int, store: ActiveConfigStore = Depends(get_config_store)):
    config = store.activate(config_id)
    return envelope(_out(config), "Homepage configuration activated successfully")
