# module backend.orders.models
"""Types de la feature Commandes.
- OrderStatus / PaymentMethod: énumérations fermées (plus de chaînes libres).
- ALLOWED_TRANSITIONS + validate_transition: machine à états du cycle de vie.
- Schémas pydantic des corps de requête.
- serialize_order: ligne table 'orders' -> JSON public (clés camelCase).
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field, ConfigDict, model_validator

from backend.utils.errors import InvalidTransitionError


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    COD = "cod"
    ONLINE = "online"


ALLOWED_TRANSITIONS: Dict[OrderStatus, Set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    # Réassigner le même statut est un no-op accepté
    return current == target or target in ALLOWED_TRANSITIONS.get(current, set())


def validate_transition(current: str, target: str) -> OrderStatus:
    """Retourne le statut cible validé ou lève InvalidTransitionError (ex: delivered -> pending)."""
    try:
        cur = OrderStatus(current)
        tgt = OrderStatus(target)
    except ValueError:
        raise InvalidTransitionError(f"Statut inconnu: {current} -> {target}")
    if not can_transition(cur, tgt):
        raise InvalidTransitionError(f"Transition interdite: {cur.value} -> {tgt.value}")
    return tgt


# --- Corps de requête ---

class LineItemIn(BaseModel):
    productId: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class CreateOrderRequest(BaseModel):
    products: List[LineItemIn] = Field(default_factory=list)
    paymentMethod: PaymentMethod = PaymentMethod.COD
    addressId: Optional[str] = None


class UpdateOrderRequest(BaseModel):
    status: Optional[OrderStatus] = None
    deliveryDate: Optional[datetime] = None

    @model_validator(mode="after")
    def _at_least_one(self):
        if self.status is None and self.deliveryDate is None:
            raise ValueError("Aucune donnée à mettre à jour")
        return self


class VerifyPaymentRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    razorpay_order_id: str = Field(min_length=1)
    razorpay_payment_id: str = Field(min_length=1)
    razorpay_signature: str = Field(min_length=1)


# --- Sérialisation ---

def serialize_order(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Projette une ligne 'orders' vers la forme JSON publique de la commande."""
    if not row:
        return None
    out = {
        "_id": row.get("id"),
        "userId": row.get("user_id"),
        "products": row.get("products") or [],
        "paymentMethod": row.get("payment_method"),
        "paymentInfo": row.get("payment_info") or {},
        "status": row.get("status"),
        "isPaid": bool(row.get("is_paid")),
        "deliveryAddress": row.get("delivery_address"),
        "addressId": row.get("address_id"),
        "razorpayOrder": row.get("razorpay_order"),
        "razorpayPaymentId": row.get("razorpay_payment_id"),
        "razorpaySignature": row.get("razorpay_signature"),
        "createdAt": row.get("created_at"),
        "deliveryDate": row.get("delivery_date"),
    }
    # Jointure acheteur (GET admin / détail)
    if row.get("users"):
        out["user"] = row["users"]
    return out
