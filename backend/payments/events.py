"""
Contrat des événements webhook Razorpay retenu.
- Seul "payment.captured" déclenche un rapprochement.
- L'identifiant de commande passerelle est lu dans payload.payment.entity.order_id,
  l'identifiant de paiement dans payload.payment.entity.id.
"""
from typing import Any, Dict, Optional, Tuple

CAPTURED_EVENT = "payment.captured"

def extract_captured_payment(event: Dict[str, Any]) -> Optional[Tuple[str, Optional[str]]]:
    """
    Retourne (gateway_order_id, gateway_payment_id) pour un paiement capturé.
    None si l'événement est d'un autre type ou ne porte pas d'order_id.
    """
    if not isinstance(event, dict) or event.get("event") != CAPTURED_EVENT:
        return None
    entity = (((event.get("payload") or {}).get("payment") or {}).get("entity")) or {}
    order_id = entity.get("order_id")
    if not order_id:
        return None
    return str(order_id), (str(entity["id"]) if entity.get("id") else None)
