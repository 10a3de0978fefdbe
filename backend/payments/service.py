"""
Cas d'usage 'payments': session passerelle et rapprochement des paiements.
- create_gateway_session: montant facturé -> commande Razorpay (receipt = id commande)
- confirm_client_payment: flux client (signature "order|payment", clé API secrète)
- handle_webhook: flux serveur (signature du corps brut, secret webhook)
Les deux flux aboutissent à apply_payment, idempotent.
"""
from typing import Any, Dict, Optional
import json
import logging

from backend import config
from backend.orders import repository as orders_repository
from backend.orders.models import OrderStatus
from backend.orders.pricing import to_minor_units
from backend.utils.errors import InvalidSignatureError, UpstreamError, ValidationError
from .events import extract_captured_payment
from .gateway import PaymentGateway
from .signatures import client_confirmation_message, verify_signature

logger = logging.getLogger(__name__)

def create_gateway_session(gateway: Optional[PaymentGateway], order_id: str, billed: Any) -> Dict[str, Any]:
    """
    Crée la session de paiement pour une commande en ligne.
    Retourne la forme persistée sur la commande: {"id", "amount", "currency"}.
    """
    if gateway is None:
        raise UpstreamError("Passerelle de paiement non configurée")
    session = gateway.create_session(to_minor_units(billed), config.PAYMENT_CURRENCY, order_id)
    return {"id": session["sessionId"], "amount": session["amount"], "currency": session["currency"]}

def apply_payment(order: Dict[str, Any], payment_id: Optional[str], signature: Optional[str] = None) -> Dict[str, Any]:
    """
    Rapprochement: is_paid=True, référence de paiement (et signature si fournie).
    Le statut ne bouge que depuis 'pending' (-> 'processing'): rejouer un
    événement ne fait jamais régresser une commande expédiée ou livrée.
    """
    data: Dict[str, Any] = {"is_paid": True}
    if order.get("status") == OrderStatus.PENDING.value:
        data["status"] = OrderStatus.PROCESSING.value
    if payment_id:
        data["razorpay_payment_id"] = payment_id
    if signature:
        data["razorpay_signature"] = signature
    updated = orders_repository.update_order(str(order.get("id")), data)
    logger.info("payments.apply_payment order_id=%s payment_id=%s", order.get("id"), payment_id)
    return updated or {**order, **data}

def confirm_client_payment(gateway_order_id: str, payment_id: str, signature: str) -> Optional[Dict[str, Any]]:
    """
    Vérifie la signature client puis rapproche la commande.
    - Signature invalide: InvalidSignatureError, aucune écriture
    - Aucune commande associée: None (le paiement est authentique mais orphelin)
    """
    message = client_confirmation_message(gateway_order_id, payment_id)
    if not verify_signature(config.RAZORPAY_KEY_SECRET, message, signature):
        logger.warning("payments.verify invalid signature gateway_order_id=%s", gateway_order_id)
        raise InvalidSignatureError("Signature de paiement invalide")

    order = orders_repository.find_by_gateway_order_id(gateway_order_id)
    if not order:
        logger.warning("payments.verify no order for gateway_order_id=%s", gateway_order_id)
        return None
    return apply_payment(order, payment_id, signature)

def handle_webhook(raw_body: bytes, signature_header: Optional[str]) -> Dict[str, Any]:
    """
    Webhook Razorpay.
    - Signature: HMAC du corps brut avec RAZORPAY_WEBHOOK_SECRET (en-tête X-Razorpay-Signature)
    - payment.captured: rapproche la commande dont razorpay_order.id == entity.order_id
    - Autres événements: acquittés sans effet
    Retour: {"status": "ok"} (+ "orderId" quand une commande est rapprochée)
    """
    if not verify_signature(config.RAZORPAY_WEBHOOK_SECRET, raw_body, signature_header):
        logger.warning("payments.webhook invalid signature")
        raise InvalidSignatureError("Signature webhook invalide")
    try:
        event = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise ValidationError("Payload webhook invalide") from e

    captured = extract_captured_payment(event)
    if captured is None:
        logger.info("payments.webhook ignored event=%s", (event or {}).get("event") if isinstance(event, dict) else None)
        return {"status": "ok"}

    gateway_order_id, payment_id = captured
    order = orders_repository.find_by_gateway_order_id(gateway_order_id)
    if not order:
        logger.warning("payments.webhook no order for gateway_order_id=%s", gateway_order_id)
        return {"status": "ok"}
    updated = apply_payment(order, payment_id)
    return {"status": "ok", "orderId": updated.get("id")}
