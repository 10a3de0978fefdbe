import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from backend import config
from backend.orders.models import VerifyPaymentRequest, serialize_order
from backend.utils.errors import UpstreamError
from backend.utils.security import require_user
from . import service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/order/payment", tags=["Payments API"])

# module backend.payments.views
@router.post("/verify")
def verify_payment(body: VerifyPaymentRequest, user: dict = Depends(require_user)):
    """
    Confirmation côté client après le paiement Razorpay.
    - Entrée: {razorpay_order_id, razorpay_payment_id, razorpay_signature}
    - 400 si la signature ne correspond pas (aucune écriture)
    - Succès: {"success": true, "order": <commande|null>}
    """
    order = service.confirm_client_payment(
        body.razorpay_order_id,
        body.razorpay_payment_id,
        body.razorpay_signature,
    )
    logger.info("payments.verify user_id=%s matched=%s", user.get("id"), order is not None)
    return {"success": True, "message": "Paiement vérifié", "order": serialize_order(order)}

@router.post("/webhook", include_in_schema=False)
async def payment_webhook(request: Request):
    """
    Webhook Razorpay: pas d'authentification, seule la signature fait foi.
    Le traitement (DB) tourne hors boucle et est borné par WEBHOOK_TIMEOUT.
    """
    raw_body = await request.body()
    signature = request.headers.get("X-Razorpay-Signature")
    try:
        return await asyncio.wait_for(
            run_in_threadpool(service.handle_webhook, raw_body, signature),
            timeout=config.WEBHOOK_TIMEOUT,
        )
    except asyncio.TimeoutError as e:
        logger.error("payments.webhook timed out after %ss", config.WEBHOOK_TIMEOUT)
        raise UpstreamError("Traitement du webhook trop long") from e
