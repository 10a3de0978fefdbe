"""
Cas d'usage 'orders': prise de commande, consultation, cycle de vie, suppression.
Orchestre users (acheteur, adresses, panier), products (prix), pricing,
payments (session passerelle) et le repository orders.
"""
from typing import Any, Dict, List, Optional
from uuid import uuid4
import copy
import logging

from backend.payments import service as payments_service
from backend.products import repository as products_repository
from backend.users import repository as users_repository
from backend.users import service as users_service
from backend.utils.errors import NotFoundError, ValidationError
from backend.utils.security import ensure_owner_or_admin
from . import repository
from .models import OrderStatus, PaymentMethod, serialize_order, validate_transition
from .pricing import compute_pricing

logger = logging.getLogger(__name__)

def expand_line_items(order: Optional[Dict[str, Any]], products_by_id: Optional[Dict[str, Dict[str, Any]]] = None) -> Optional[Dict[str, Any]]:
    """Ajoute 'product' à chaque ligne de la commande sérialisée (équivalent populate)."""
    if not order:
        return order
    items = order.get("products") or []
    if products_by_id is None:
        products_by_id = products_repository.get_products_map(i.get("productId") for i in items)
    order["products"] = [
        {**item, "product": products_by_id.get(str(item.get("productId")))} for item in items
    ]
    return order

def create_order(
    user_id: str,
    items: List[Dict[str, Any]],
    payment_method: PaymentMethod,
    address_id: Optional[str],
    gateway=None,
) -> Dict[str, Any]:
    """
    Prise de commande (tout ou rien jusqu'à l'insertion).
    1) Valide lignes, acheteur et adresse
    2) Résout tous les produits en une requête; le premier ID absent (ordre d'entrée) => 404
    3) Calcule les montants et fige une copie de l'adresse
    4) Paiement en ligne: session passerelle avant l'insertion
    5) Insère puis retire les produits achetés du panier (échec loggé, commande conservée)
    Retour: {"order": <commande sérialisée, lignes hydratées>, "razorpayOrder": <session|None>}
    """
    if not items:
        raise ValidationError("Aucun produit dans la commande")

    buyer = users_repository.get_user_by_id(user_id)
    if not buyer:
        raise NotFoundError("Utilisateur introuvable")
    address = users_service.find_address(buyer, address_id)
    if not address:
        raise ValidationError("Adresse de livraison invalide")

    line_items = [{"productId": str(i["productId"]), "quantity": int(i["quantity"])} for i in items]
    products_by_id = products_repository.get_products_map(li["productId"] for li in line_items)
    for li in line_items:
        if li["productId"] not in products_by_id:
            raise NotFoundError(f"Produit {li['productId']} introuvable")

    method = PaymentMethod(payment_method)
    order_id = str(uuid4())
    row: Dict[str, Any] = {
        "id": order_id,
        "user_id": str(buyer.get("id")),
        "products": line_items,
        "payment_method": method.value,
        "payment_info": compute_pricing(line_items, products_by_id),
        "status": OrderStatus.PENDING.value,
        "is_paid": False,
        "delivery_address": copy.deepcopy(address),
        "address_id": str(address.get("id")),
    }

    gateway_session = None
    if method == PaymentMethod.ONLINE:
        gateway_session = payments_service.create_gateway_session(gateway, order_id, row["payment_info"]["billingAmount"])
        row["razorpay_order"] = gateway_session

    created = repository.insert_order(row)
    logger.info("orders.create id=%s user_id=%s method=%s billed=%s", order_id, row["user_id"], method.value, row["payment_info"]["billingAmount"])

    try:
        users_service.clear_purchased(buyer, [li["productId"] for li in line_items])
    except Exception:
        # La commande existe déjà: pas de rollback, le panier reste à nettoyer
        logger.exception("orders.create cart cleanup failed id=%s user_id=%s", order_id, row["user_id"])

    return {
        "order": expand_line_items(serialize_order(created), products_by_id),
        "razorpayOrder": gateway_session,
    }

def list_all() -> List[Dict[str, Any]]:
    return [serialize_order(o) for o in repository.list_orders()]

def get_for_user(order_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    """Détail d'une commande: propriétaire ou admin uniquement."""
    order = repository.get_order(order_id, with_user=True)
    if not order:
        raise NotFoundError("Commande introuvable")
    ensure_owner_or_admin(user, order.get("user_id"))
    return expand_line_items(serialize_order(order))

def list_for_buyer(buyer_id: str, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    ensure_owner_or_admin(user, buyer_id)
    return [expand_line_items(serialize_order(o)) for o in repository.list_user_orders(buyer_id)]

def update_order(order_id: str, status: Optional[str] = None, delivery_date=None) -> Dict[str, Any]:
    """
    Mise à jour admin: statut (machine à états) et/ou date de livraison.
    Transition interdite => InvalidTransitionError (409), rien n'est écrit.
    """
    order = repository.get_order(order_id)
    if not order:
        raise NotFoundError("Commande introuvable")

    data: Dict[str, Any] = {}
    if status is not None:
        data["status"] = validate_transition(order.get("status"), status).value
    if delivery_date is not None:
        data["delivery_date"] = delivery_date.isoformat()
    if not data:
        raise ValidationError("Aucune donnée à mettre à jour")

    updated = repository.update_order(order_id, data)
    if not updated:
        raise NotFoundError("Commande introuvable")
    logger.info("orders.update id=%s fields=%s", order_id, sorted(data))
    return serialize_order(updated)

def delete_order(order_id: str) -> None:
    """Suppression admin, seulement tant que la commande est 'pending'."""
    order = repository.get_order(order_id)
    if not order:
        raise NotFoundError("Commande introuvable")
    if order.get("status") != OrderStatus.PENDING.value:
        raise ValidationError("Seule une commande en attente peut être supprimée")
    if not repository.delete_pending_order(order_id):
        # Statut modifié entre la lecture et la suppression
        raise ValidationError("Seule une commande en attente peut être supprimée")
    logger.info("orders.delete id=%s", order_id)
