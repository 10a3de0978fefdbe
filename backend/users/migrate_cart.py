# module backend.users.migrate_cart
"""
Migration ponctuelle des paniers vers la représentation unique {product_id: quantity}.

Usage:
    python -m backend.users.migrate_cart            # applique
    DRY_RUN=1 python -m backend.users.migrate_cart  # compte sans écrire

Les paniers historiques (liste d'IDs ou liste de {product, quantity}) sont
réécrits; les paniers déjà au bon format ne sont pas touchés.
"""
from typing import Dict
import logging
import os

from . import cart as cart_logic
from . import repository

logger = logging.getLogger(__name__)

def migrate_carts(batch_size: int = 500, dry_run: bool = False) -> Dict[str, int]:
    """Parcourt la table users par pages et réécrit les paniers historiques."""
    stats = {"scanned": 0, "migrated": 0}
    offset = 0
    while True:
        rows = repository.list_user_carts(batch_size=batch_size, offset=offset)
        if not rows:
            break
        for row in rows:
            stats["scanned"] += 1
            raw = row.get("cart")
            if not cart_logic.is_legacy_cart(raw):
                continue
            stats["migrated"] += 1
            if not dry_run:
                repository.update_user(str(row.get("id")), {"cart": cart_logic.normalize_legacy_cart(raw)})
        if len(rows) < batch_size:
            break
        offset += batch_size
    logger.info("users.migrate_cart scanned=%s migrated=%s dry_run=%s", stats["scanned"], stats["migrated"], dry_run)
    return stats

if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    dry = os.environ.get("DRY_RUN", "").lower() in ("1", "true", "yes")
    result = migrate_carts(dry_run=dry)
    print(f"Paniers analysés: {result['scanned']}, migrés: {result['migrated']}")
