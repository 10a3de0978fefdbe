# module backend.products.views
"""API catalogue produits (/api/product).
Lecture publique avec taxonomies embarquées; écriture réservée aux admins.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from backend.utils.errors import NotFoundError, PersistenceError, ValidationError
from backend.utils.security import require_admin
from . import repository
from .models import ProductCreate, ProductUpdate

router = APIRouter(prefix="/api/product", tags=["Products API"])

@router.get("")
def list_products():
    return repository.list_products()

@router.get("/category/{category_id}")
def list_products_by_category(category_id: str):
    return repository.list_products(category_id=category_id)

@router.get("/{product_id}")
def get_product(product_id: str):
    product = repository.get_product(product_id)
    if not product:
        raise NotFoundError("Produit introuvable")
    return product

@router.post("", status_code=201)
def create_product(body: ProductCreate, admin: Dict[str, Any] = Depends(require_admin)):
    created = repository.create_product(body.to_row())
    if not created:
        raise PersistenceError("Création du produit impossible")
    return {"message": "Produit ajouté", "product": repository.get_product(str(created.get("id"))) or created}

@router.put("/{product_id}")
def update_product(product_id: str, body: ProductUpdate, admin: Dict[str, Any] = Depends(require_admin)):
    data = body.to_row()
    if not data:
        raise ValidationError("Aucune donnée à mettre à jour")
    updated = repository.update_product(product_id, data)
    if not updated:
        raise NotFoundError("Produit introuvable")
    return {"message": "Produit mis à jour", "product": repository.get_product(product_id) or updated}

@router.delete("/{product_id}")
def delete_product(product_id: str, admin: Dict[str, Any] = Depends(require_admin)):
    if not repository.delete_product(product_id):
        raise NotFoundError("Produit introuvable")
    return {"message": "Produit supprimé"}
