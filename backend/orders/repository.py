"""
Accès aux données pour la feature 'orders' (table Supabase 'orders').
Contrairement aux lectures catalogue, les échecs de stockage ne sont pas avalés:
ils sont loggés puis remontés en PersistenceError (500), pour ne jamais confondre
« introuvable » et « base indisponible ».
"""
from typing import Any, Dict, List, Optional
import logging

import backend.infra.supabase_client as supabase_client
from backend.utils.errors import PersistenceError

logger = logging.getLogger(__name__)

TABLE = "orders"
USER_FIELDS = "users(id, first_name, last_name, email, phone_number)"

def _first(res) -> Optional[dict]:
    rows = getattr(res, "data", None) or []
    return rows[0] if isinstance(rows, list) and rows else None

def insert_order(row: Dict[str, Any]) -> dict:
    """Insère la commande (id déjà généré par le service) et retourne la ligne créée."""
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(row).execute()
    except Exception as e:
        logger.exception("orders.repository.insert_order failed id=%s", row.get("id"))
        raise PersistenceError(str(e)) from e
    return _first(res) or dict(row)

def get_order(order_id: str, with_user: bool = False) -> Optional[dict]:
    if not order_id:
        return None
    select = f"*, {USER_FIELDS}" if with_user else "*"
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select(select)
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.get_order failed id=%s", order_id)
        raise PersistenceError(str(e)) from e
    return _first(res)

def list_orders(limit: int = 200) -> List[dict]:
    """Toutes les commandes (admin), jointure acheteur, plus récentes d'abord."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select(f"*, {USER_FIELDS}")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.list_orders failed")
        raise PersistenceError(str(e)) from e
    return res.data or []

def list_user_orders(user_id: str) -> List[dict]:
    if not user_id:
        return []
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.list_user_orders failed user_id=%s", user_id)
        raise PersistenceError(str(e)) from e
    return res.data or []

def find_by_gateway_order_id(gateway_order_id: str) -> Optional[dict]:
    """Retrouve la commande dont razorpay_order.id == gateway_order_id (filtre JSON PostgREST)."""
    if not gateway_order_id:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq("razorpay_order->>id", gateway_order_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.find_by_gateway_order_id failed gateway_order_id=%s", gateway_order_id)
        raise PersistenceError(str(e)) from e
    return _first(res)

def update_order(order_id: str, data: Dict[str, Any]) -> Optional[dict]:
    """Mise à jour mono-document; retourne la ligne à jour ou None si introuvable."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update(data)
            .eq("id", order_id)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.update_order failed id=%s fields=%s", order_id, sorted(data))
        raise PersistenceError(str(e)) from e
    return _first(res)

def delete_pending_order(order_id: str) -> bool:
    """Supprime la commande seulement si elle est encore 'pending' (garde côté requête)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .delete()
            .eq("id", order_id)
            .eq("status", "pending")
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.delete_pending_order failed id=%s", order_id)
        raise PersistenceError(str(e)) from e
    return bool(res.data)
