"""
Calcul des montants d'une commande (logique pure: pas de DB, pas de passerelle).
Les prix sont capturés à la création: on ne les recalcule jamais ensuite.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

CENT = Decimal("0.01")

def to_decimal(value: Any) -> Decimal:
    """Convertit un prix (str|int|float|None) en Decimal via str() pour éviter la dérive float."""
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))

def unit_prices(product: Dict[str, Any]) -> tuple:
    """(price, original_price) d'un produit; original_price absent => égal à price."""
    price = to_decimal(product.get("price"))
    original = product.get("original_price")
    original_price = to_decimal(original) if original not in (None, "") else price
    return price, original_price

def compute_pricing(line_items: List[Dict[str, Any]], products_by_id: Dict[str, Dict[str, Any]]) -> Dict[str, float]:
    """
    billed = Σ price × qty ; saved = Σ (originalPrice − price) × qty.
    - line_items: [{"productId": str, "quantity": int}], tous résolus dans products_by_id
    - Arithmétique Decimal: résultat exact et indépendant de l'ordre des lignes
    Retour: {"billingAmount": float, "totalSaved": float}
    """
    billed = Decimal("0")
    saved = Decimal("0")
    for item in line_items:
        product = products_by_id[str(item["productId"])]
        qty = int(item["quantity"])
        price, original_price = unit_prices(product)
        billed += price * qty
        saved += (original_price - price) * qty
    return {
        "billingAmount": float(billed.quantize(CENT, rounding=ROUND_HALF_UP)),
        "totalSaved": float(saved.quantize(CENT, rounding=ROUND_HALF_UP)),
    }

def to_minor_units(amount: Any) -> int:
    """Montant en unité mineure (paise): ×100 arrondi au plus proche."""
    return int((to_decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
