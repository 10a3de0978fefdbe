# module backend.taxonomies.views
"""Routes CRUD des taxonomies (catégories, couleurs, types de plante, types de produit).
Lecture publique; création / modification / suppression réservées aux admins.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend.utils.errors import NotFoundError, PersistenceError
from backend.utils.security import require_admin
from .repository import TaxonomyRepository


class TaxonomyIn(BaseModel):
    name: str = Field(min_length=1)


def build_router(prefix: str, table: str, label: str, tag: str) -> APIRouter:
    """Construit le routeur /api/<prefix> pour une table de taxonomie."""
    repo = TaxonomyRepository(table)
    router = APIRouter(prefix=f"/api/{prefix}", tags=[tag])

    @router.get("")
    def list_entries():
        return repo.list()

    @router.get("/{entry_id}")
    def get_entry(entry_id: str):
        entry = repo.get(entry_id)
        if not entry:
            raise NotFoundError(f"{label} introuvable")
        return entry

    @router.post("", status_code=201)
    def create_entry(body: TaxonomyIn, admin: Dict[str, Any] = Depends(require_admin)):
        created = repo.create({"name": body.name.strip()})
        if not created:
            raise PersistenceError(f"Création impossible ({label})")
        return {"message": f"{label} créé(e)", "data": created}

    @router.put("/{entry_id}")
    def update_entry(entry_id: str, body: TaxonomyIn, admin: Dict[str, Any] = Depends(require_admin)):
        updated = repo.update(entry_id, {"name": body.name.strip()})
        if not updated:
            raise NotFoundError(f"{label} introuvable")
        return {"message": f"{label} mis(e) à jour", "data": updated}

    @router.delete("/{entry_id}")
    def delete_entry(entry_id: str, admin: Dict[str, Any] = Depends(require_admin)):
        if not repo.delete(entry_id):
            raise NotFoundError(f"{label} introuvable")
        return {"message": f"{label} supprimé(e)"}

    return router


category_router = build_router("category", "categories", "Catégorie", "Categories API")
colortype_router = build_router("colortype", "color_types", "Couleur", "Color types API")
planttype_router = build_router("planttype", "plant_types", "Type de plante", "Plant types API")
producttype_router = build_router("producttype", "product_types", "Type de produit", "Product types API")

routers = [category_router, colortype_router, planttype_router, producttype_router]
