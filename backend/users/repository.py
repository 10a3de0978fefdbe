"""Couche d'accès aux données (Supabase) pour le domaine Utilisateurs (table users).
Toutes les opérations passent par le client service-role: l'autorisation est faite
côté API (JWT). Les échecs de stockage remontent en PersistenceError; « introuvable »
se traduit par None.
"""
from typing import Any, Dict, List, Optional
import logging

from postgrest.exceptions import APIError

import backend.infra.supabase_client as supabase_client
from backend.utils.errors import ConflictError, PersistenceError

logger = logging.getLogger(__name__)

TABLE = "users"

def _first(res) -> Optional[dict]:
    rows = getattr(res, "data", None) or []
    return rows[0] if isinstance(rows, list) and rows else None

def _find_one(column: str, value: Any) -> Optional[dict]:
    if not value:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("users.repository._find_one failed column=%s", column)
        raise PersistenceError(str(e)) from e
    return _first(res)

def get_user_by_id(user_id: str) -> Optional[dict]:
    return _find_one("id", user_id)

def get_user_by_email(email: str) -> Optional[dict]:
    return _find_one("email", (email or "").strip().lower())

def get_user_by_phone(phone_number: str) -> Optional[dict]:
    return _find_one("phone_number", phone_number)

def list_customers(limit: int = 500) -> List[dict]:
    """Utilisateurs non-admin (vue admin)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq("is_admin", False)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        logger.exception("users.repository.list_customers failed")
        raise PersistenceError(str(e)) from e
    return res.data or []

def list_user_carts(batch_size: int = 500, offset: int = 0) -> List[dict]:
    """Page de tous les utilisateurs (id, cart), sans filtre: migrate_cart trie lui-même les paniers historiques."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("id, cart")
            .order("id")
            .range(offset, offset + batch_size - 1)
            .execute()
        )
    except Exception as e:
        logger.exception("users.repository.list_user_carts failed offset=%s", offset)
        raise PersistenceError(str(e)) from e
    return res.data or []

def create_user(data: Dict[str, Any]) -> dict:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(data).execute()
    except APIError as e:
        # Doublon (23505) sur phone_number / email: inscription concurrente
        code = e.args[0].get("code") if e.args and isinstance(e.args[0], dict) else getattr(e, "code", None)
        if code == "23505":
            raise ConflictError("Utilisateur déjà enregistré") from e
        logger.exception("users.repository.create_user failed phone=%s", data.get("phone_number"))
        raise PersistenceError(str(e)) from e
    except Exception as e:
        logger.exception("users.repository.create_user failed phone=%s", data.get("phone_number"))
        raise PersistenceError(str(e)) from e
    return _first(res) or dict(data)

def update_user(user_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update(data)
            .eq("id", user_id)
            .execute()
        )
    except Exception as e:
        logger.exception("users.repository.update_user failed id=%s fields=%s", user_id, sorted(data))
        raise PersistenceError(str(e)) from e
    return _first(res)

def delete_user(user_id: str) -> bool:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).delete().eq("id", user_id).execute()
    except Exception as e:
        logger.exception("users.repository.delete_user failed id=%s", user_id)
        raise PersistenceError(str(e)) from e
    return bool(res.data)
