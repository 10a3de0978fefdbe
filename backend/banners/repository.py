from typing import Any, Dict, List, Optional
import logging

import backend.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

TABLE = "banners"

def list_banners() -> List[dict]:
    try:
        res = supabase_client.get_supabase().table(TABLE).select("*").execute()
        return res.data or []
    except Exception:
        logger.exception("banners.repository.list_banners failed")
        return []

def get_banner(banner_type: str) -> Optional[dict]:
    try:
        res = supabase_client.get_supabase().table(TABLE).select("*").eq("type", banner_type).limit(1).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("banners.repository.get_banner failed type=%s", banner_type)
        return None

def create_banner(data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(data).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("banners.repository.create_banner failed type=%s", data.get("type"))
        return None

def update_banner(banner_type: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).update(data).eq("type", banner_type).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("banners.repository.update_banner failed type=%s", banner_type)
        return None

def delete_banner(banner_type: str) -> bool:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).delete().eq("type", banner_type).execute()
        return bool(res.data)
    except Exception:
        logger.exception("banners.repository.delete_banner failed type=%s", banner_type)
        return False
