"""
Primitive unique de vérification de signature, déléguée au SDK Razorpay.
Utilisée à l'identique par la confirmation client et par le webhook: seuls le
secret et les octets du message changent.
"""
import string
from typing import Optional

from razorpay.errors import SignatureVerificationError
from razorpay.utility import Utility

_HEX = frozenset(string.hexdigits)
_utility = Utility()

def verify_signature(secret: str, message: bytes, provided: Optional[str]) -> bool:
    """
    True si provided == HMAC_SHA256(secret, message) en hex (Utility.verify_webhook_signature).
    - Secret ou signature vides => False (jamais de signature « par défaut »)
    - Signature non hexadécimale (ex: caractères non ASCII) => False avant comparaison
    """
    if not secret or not provided:
        return False
    provided = provided.strip()
    if not provided or not set(provided) <= _HEX:
        return False
    try:
        body = message.decode("utf-8")
    except UnicodeDecodeError:
        return False
    try:
        return bool(_utility.verify_webhook_signature(body, provided, secret))
    except SignatureVerificationError:
        return False

def client_confirmation_message(gateway_order_id: str, gateway_payment_id: str) -> bytes:
    """Message signé par la passerelle pour le flux client: "<order_id>|<payment_id>" en UTF-8."""
    return f"{gateway_order_id}|{gateway_payment_id}".encode("utf-8")
