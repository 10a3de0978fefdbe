from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from backend.payments.gateway import PaymentGateway, get_gateway
from backend.utils.rate_limit import optional_rate_limit
from backend.utils.security import require_user, require_admin
from . import service
from .models import CreateOrderRequest, UpdateOrderRequest

router = APIRouter(prefix="/api/order", tags=["Orders API"])

# module backend.orders.views
@router.post("", status_code=201, dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_order(
    body: CreateOrderRequest,
    user: Dict[str, Any] = Depends(require_user),
    gateway: Optional[PaymentGateway] = Depends(get_gateway),
):
    """
    Crée une commande pour l'utilisateur authentifié.
    - Entrée: {"products": [{"productId", "quantity"}], "paymentMethod": "cod"|"online", "addressId"}
    - 201: {"message", "order"} (+ "razorpayOrder" pour un paiement en ligne)
    - 400 panier vide / adresse invalide, 404 produit inconnu, 500 passerelle indisponible
    """
    result = service.create_order(
        user_id=user.get("id"),
        items=[item.model_dump() for item in body.products],
        payment_method=body.paymentMethod,
        address_id=body.addressId,
        gateway=gateway,
    )
    response = {"message": "Commande créée", "order": result["order"]}
    if result["razorpayOrder"] is not None:
        response["razorpayOrder"] = result["razorpayOrder"]
    return response

@router.get("")
def list_orders(admin: Dict[str, Any] = Depends(require_admin)):
    return {"orders": service.list_all()}

@router.get("/user/{user_id}")
def list_user_orders(user_id: str, user: Dict[str, Any] = Depends(require_user)):
    """Commandes d'un acheteur (propriétaire ou admin)."""
    return {"orders": service.list_for_buyer(user_id, user)}

@router.get("/{order_id}")
def get_order(order_id: str, user: Dict[str, Any] = Depends(require_user)):
    return {"order": service.get_for_user(order_id, user)}

@router.put("/{order_id}")
def update_order(order_id: str, body: UpdateOrderRequest, admin: Dict[str, Any] = Depends(require_admin)):
    """Admin: statut (transitions contrôlées, 409 sinon) et/ou date de livraison."""
    order = service.update_order(
        order_id,
        status=body.status.value if body.status is not None else None,
        delivery_date=body.deliveryDate,
    )
    return {"message": "Commande mise à jour", "order": order}

@router.delete("/{order_id}")
def delete_order(order_id: str, admin: Dict[str, Any] = Depends(require_admin)):
    """Admin: suppression autorisée uniquement pour une commande 'pending'."""
    service.delete_order(order_id)
    return {"message": "Commande supprimée"}
