"""
Accès aux tables de taxonomie du catalogue: categories, color_types,
plant_types, product_types. Même forme {id, name} pour les quatre, d'où un
repository paramétré par le nom de table.
Lectures via le client anon (échecs => liste vide / None), écritures via le
client service.
"""
from typing import Any, Dict, List, Optional
import logging

import backend.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

class TaxonomyRepository:
    def __init__(self, table: str):
        self.table = table

    def list(self) -> List[dict]:
        try:
            res = supabase_client.get_supabase().table(self.table).select("*").order("name").execute()
            return res.data or []
        except Exception:
            logger.exception("taxonomies.repository.list failed table=%s", self.table)
            return []

    def get(self, entry_id: str) -> Optional[dict]:
        if not entry_id:
            return None
        try:
            res = supabase_client.get_supabase().table(self.table).select("*").eq("id", entry_id).limit(1).execute()
            rows = res.data or []
            return rows[0] if rows else None
        except Exception:
            logger.exception("taxonomies.repository.get failed table=%s id=%s", self.table, entry_id)
            return None

    def create(self, data: Dict[str, Any]) -> Optional[dict]:
        try:
            res = supabase_client.get_service_supabase().table(self.table).insert(data).execute()
            rows = getattr(res, "data", None) or []
            return rows[0] if isinstance(rows, list) and rows else None
        except Exception:
            logger.exception("taxonomies.repository.create failed table=%s", self.table)
            return None

    def update(self, entry_id: str, data: Dict[str, Any]) -> Optional[dict]:
        try:
            res = supabase_client.get_service_supabase().table(self.table).update(data).eq("id", entry_id).execute()
            rows = getattr(res, "data", None) or []
            return rows[0] if isinstance(rows, list) and rows else None
        except Exception:
            logger.exception("taxonomies.repository.update failed table=%s id=%s", self.table, entry_id)
            return None

    def delete(self, entry_id: str) -> bool:
        """True si une ligne a effectivement été supprimée."""
        try:
            res = supabase_client.get_service_supabase().table(self.table).delete().eq("id", entry_id).execute()
            return bool(res.data)
        except Exception:
            logger.exception("taxonomies.repository.delete failed table=%s id=%s", self.table, entry_id)
            return False
