"""
Logique panier pure (pas de DB).
Représentation unique: mapping {product_id: quantity} (quantity >= 1).
Les anciennes formes (liste d'IDs, liste de {product, quantity}) ne sont lues
que par normalize_legacy_cart, utilisé par la migration ponctuelle.
"""
from typing import Any, Dict, Iterable

Cart = Dict[str, int]

def add_item(cart: Cart, product_id: str, quantity: int = 1) -> Cart:
    updated = dict(cart or {})
    updated[product_id] = int(updated.get(product_id, 0)) + max(int(quantity), 1)
    return updated

def decrement_item(cart: Cart, product_id: str) -> Cart:
    """Décrémente la quantité; supprime la ligne quand elle atteint 0."""
    updated = dict(cart or {})
    qty = int(updated.get(product_id, 0))
    if qty > 1:
        updated[product_id] = qty - 1
    else:
        updated.pop(product_id, None)
    return updated

def remove_products(cart: Cart, product_ids: Iterable[str]) -> Cart:
    """Retire entièrement les produits achetés (prise de commande)."""
    purchased = {str(p) for p in product_ids}
    return {pid: qty for pid, qty in (cart or {}).items() if pid not in purchased}

def is_legacy_cart(raw: Any) -> bool:
    return raw is not None and not isinstance(raw, dict)

def normalize_legacy_cart(raw: Any) -> Cart:
    """
    Convertit un panier historique en mapping.
    - [pid, pid, ...] -> chaque occurrence compte pour 1
    - [{"product": pid, "quantity": n}, ...] -> quantités cumulées
    - dict déjà migré -> recopié (quantités <= 0 ignorées)
    """
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return {str(k): int(v) for k, v in raw.items() if int(v or 0) > 0}
    cart: Cart = {}
    for entry in raw:
        if isinstance(entry, dict):
            pid = entry.get("product") or entry.get("productId")
            qty = entry.get("quantity", 1)
            # quantité explicite 0 ou None: article retiré
            qty = int(qty) if qty is not None else 0
        else:
            pid, qty = entry, 1
        if not pid or qty <= 0:
            continue
        cart[str(pid)] = cart.get(str(pid), 0) + qty
    return cart
