from typing import Iterable, List, Optional, Dict, Any
import logging

import backend.infra.supabase_client as supabase_client
from backend.utils.errors import PersistenceError

logger = logging.getLogger(__name__)

TABLE = "products"
# Jointures taxonomies (équivalent du populate "category productType plantType color")
EXPANDED = (
    "*, category:categories(id, name), color:color_types(id, name), "
    "product_type:product_types(id, name), plant_type:plant_types(id, name)"
)

def list_products(category_id: Optional[str] = None) -> List[dict]:
    try:
        query = supabase_client.get_supabase().table(TABLE).select(EXPANDED)
        if category_id:
            query = query.eq("category_id", category_id)
        res = query.order("created_at", desc=True).execute()
        return res.data or []
    except Exception:
        logger.exception("products.repository.list_products failed category_id=%s", category_id)
        return []

def get_product(product_id: str) -> Optional[dict]:
    if not product_id:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table(TABLE)
            .select(EXPANDED)
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("products.repository.get_product failed id=%s", product_id)
        return None

def fetch_products_by_ids(ids: List[str]) -> List[dict]:
    """
    Produits par IDs (prise de commande).
    Lève PersistenceError en cas d'échec: un produit « absent » doit signifier
    introuvable, pas base indisponible.
    """
    if not ids:
        return []
    try:
        res = (
            supabase_client.get_supabase()
            .table(TABLE)
            .select("*")
            .in_("id", [str(i) for i in ids])
            .execute()
        )
    except Exception as e:
        logger.exception("products.repository.fetch_products_by_ids failed ids=%s", ids)
        raise PersistenceError(str(e)) from e
    return res.data or []

def get_products_map(ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """Retourne un dict {id: produit} à partir d'une liste d'IDs (doublons ignorés)."""
    unique = list(dict.fromkeys(str(i) for i in ids))
    return {str(p.get("id")): p for p in fetch_products_by_ids(unique)}

def create_product(data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(data).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("products.repository.create_product failed name=%s", data.get("name"))
        return None

def update_product(product_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update(data)
            .eq("id", product_id)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("products.repository.update_product failed id=%s", product_id)
        return None

def delete_product(product_id: str) -> bool:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).delete().eq("id", product_id).execute()
        return bool(res.data)
    except Exception:
        logger.exception("products.repository.delete_product failed id=%s", product_id)
        return False