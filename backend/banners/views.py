# module backend.banners.views
"""Bannières de la page d'accueil: une par type (main, offer)."""
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from backend.utils.errors import NotFoundError, PersistenceError, ValidationError
from backend.utils.security import require_admin
from . import repository

router = APIRouter(prefix="/api/banners", tags=["Banners API"])


class BannerType(str, Enum):
    MAIN = "main"
    OFFER = "offer"


class BannerIn(BaseModel):
    type: BannerType
    description: Optional[str] = None
    imageUrl: Optional[str] = None


@router.post("")
def upsert_banner(body: BannerIn, admin: Dict[str, Any] = Depends(require_admin)):
    """
    Crée ou met à jour la bannière du type donné.
    - 200 si elle existait (seuls les champs fournis changent), 201 sinon
    - Création: description et imageUrl obligatoires
    """
    banner_type = body.type.value
    changes = {}
    if body.description:
        changes["description"] = body.description
    if body.imageUrl:
        changes["image_url"] = body.imageUrl

    if repository.get_banner(banner_type):
        updated = repository.update_banner(banner_type, changes) if changes else repository.get_banner(banner_type)
        if not updated:
            raise PersistenceError("Mise à jour de la bannière impossible")
        return {"message": f"Bannière « {banner_type} » mise à jour", "banner": updated}

    if "description" not in changes or "image_url" not in changes:
        raise ValidationError("description et imageUrl sont requis")
    created = repository.create_banner({"type": banner_type, **changes})
    if not created:
        raise PersistenceError("Création de la bannière impossible")
    return JSONResponse(
        status_code=201,
        content={"message": f"Bannière « {banner_type} » créée", "banner": created},
    )

@router.get("")
def list_banners():
    return repository.list_banners()

@router.get("/{banner_type}")
def get_banner(banner_type: BannerType):
    banner = repository.get_banner(banner_type.value)
    if not banner:
        raise NotFoundError("Bannière introuvable")
    return banner

@router.delete("/{banner_type}")
def delete_banner(banner_type: BannerType, admin: Dict[str, Any] = Depends(require_admin)):
    if not repository.delete_banner(banner_type.value):
        raise NotFoundError("Bannière introuvable")
    return {"message": "Bannière supprimée"}
