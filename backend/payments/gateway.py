"""
Adaptateur Razorpay: centralise la configuration et les appels à la passerelle.
- Construit une seule fois au démarrage (lifespan) puis posé sur app.state.gateway.
- Les vues le reçoivent par la dépendance get_gateway (pas de global implicite).
- create_session: retries bornés avec backoff exponentiel + timeout par appel.
"""
from typing import Any, Callable, Dict, Optional
import logging
import time

import razorpay
from razorpay.errors import BadRequestError
from fastapi import Request

from backend.config import (
    RAZORPAY_KEY_ID,
    RAZORPAY_KEY_SECRET,
    GATEWAY_MAX_RETRIES,
    GATEWAY_RETRY_BACKOFF,
    GATEWAY_TIMEOUT,
)
from backend.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

# module backend.payments.gateway
class PaymentGateway:
    def __init__(
        self,
        client: Any,
        *,
        max_retries: int = GATEWAY_MAX_RETRIES,
        backoff: float = GATEWAY_RETRY_BACKOFF,
        timeout: float = GATEWAY_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._client = client
        self.max_retries = max(int(max_retries), 0)
        self.backoff = backoff
        self.timeout = timeout
        self._sleep = sleep

    def create_session(self, amount_minor: int, currency: str, receipt: str) -> Dict[str, Any]:
        """
        Crée une commande Razorpay pour le montant exact (unité mineure).
        - receipt: identifiant de notre commande (traçabilité côté passerelle)
        - 4xx (BadRequestError): pas de retry, la requête est fausse
        - autres échecs: jusqu'à max_retries nouvelles tentatives, backoff × 2^n
        Retour: {"sessionId", "amount", "currency"}
        Erreurs: UpstreamError après épuisement des tentatives.
        """
        payload = {"amount": int(amount_minor), "currency": currency, "receipt": str(receipt)}
        attempt = 0
        while True:
            try:
                created = self._client.order.create(data=payload, timeout=self.timeout)
                return {
                    "sessionId": created["id"],
                    "amount": created.get("amount", payload["amount"]),
                    "currency": created.get("currency", currency),
                }
            except BadRequestError as e:
                logger.warning("payments.gateway.create_session rejected receipt=%s: %s", receipt, e)
                raise UpstreamError(f"Passerelle: requête refusée ({e})") from e
            except Exception as e:
                if attempt >= self.max_retries:
                    logger.exception("payments.gateway.create_session failed receipt=%s attempts=%s", receipt, attempt + 1)
                    raise UpstreamError("Passerelle de paiement indisponible") from e
                delay = self.backoff * (2 ** attempt)
                logger.warning("payments.gateway.create_session retry receipt=%s attempt=%s delay=%.2fs", receipt, attempt + 1, delay)
                attempt += 1
                self._sleep(delay)


def build_gateway(key_id: str = RAZORPAY_KEY_ID, key_secret: str = RAZORPAY_KEY_SECRET) -> Optional[PaymentGateway]:
    """
    Construit le client Razorpay à partir de la configuration.
    Retourne None si les clés manquent: les commandes COD restent possibles,
    les commandes en ligne échoueront en UpstreamError.
    """
    if not key_id or not key_secret:
        return None
    client = razorpay.Client(auth=(key_id, key_secret))
    return PaymentGateway(client)


def get_gateway(request: Request) -> Optional[PaymentGateway]:
    """Dépendance FastAPI: handle vers la passerelle initialisée par le lifespan."""
    return getattr(request.app.state, "gateway", None)
