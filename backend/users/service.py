"""Couche service du domaine Utilisateurs.
Rôles:
- Comptes: inscription, connexion (bcrypt + JWT), profil, mot de passe, suppression.
- Carnet d'adresses: adresses identifiées par un id stable (uuid4), référencées par les commandes.
- Panier (mapping produit -> quantité) et liste de souhaits.
Les lignes users sont manipulées en dict; la projection publique passe par models.public_user.
"""
from typing import Any, Dict, List, Optional
from uuid import uuid4
import logging

from backend.auth.service import hash_password, verify_password, issue_token
from backend.products import repository as products_repository
from backend.utils.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from . import cart as cart_logic
from . import repository
from .models import public_user

logger = logging.getLogger(__name__)

def _require_user(user_id: str) -> dict:
    user = repository.get_user_by_id(user_id)
    if not user:
        raise NotFoundError("Utilisateur introuvable")
    return user

def _save(user_id: str, data: Dict[str, Any]) -> dict:
    updated = repository.update_user(user_id, data)
    if not updated:
        raise NotFoundError("Utilisateur introuvable")
    return updated

# --- Comptes ---

def register(first_name: str, phone_number: str, password: str, last_name: Optional[str] = None, email: Optional[str] = None) -> Dict[str, Any]:
    """Crée le compte (non admin) et retourne {token, user}."""
    if repository.get_user_by_phone(phone_number):
        raise ConflictError("Numéro de téléphone déjà enregistré")
    email = (email or "").strip().lower() or None
    if email and repository.get_user_by_email(email):
        raise ConflictError("Email déjà enregistré")

    row = repository.create_user({
        "id": str(uuid4()),
        "first_name": first_name.strip(),
        "last_name": (last_name or "").strip() or None,
        "email": email,
        "phone_number": phone_number,
        "password": hash_password(password),
        "is_admin": False,
        "addresses": [],
        "cart": {},
        "wishlist": [],
    })
    logger.info("users.register id=%s", row.get("id"))
    return {"token": issue_token(row), "user": public_user(row)}

def login(identifier: str, password: str) -> Dict[str, Any]:
    """identifier = email s'il contient '@', sinon numéro de téléphone."""
    identifier = (identifier or "").strip()
    if "@" in identifier:
        user = repository.get_user_by_email(identifier)
    else:
        user = repository.get_user_by_phone(identifier)
    if not user or not verify_password(password, user.get("password") or ""):
        raise AuthenticationError("Identifiants invalides")
    return {"token": issue_token(user), "user": public_user(user)}

def change_password(user_id: str, current_password: str, new_password: str) -> None:
    user = _require_user(user_id)
    if not verify_password(current_password, user.get("password") or ""):
        raise ValidationError("Mot de passe actuel incorrect")
    _save(user_id, {"password": hash_password(new_password)})

def get_profile(user_id: str) -> Dict[str, Any]:
    """Profil public + panier et liste de souhaits hydratés avec les produits."""
    user = _require_user(user_id)
    out = public_user(user)
    cart = user.get("cart") or {}
    wishlist = user.get("wishlist") or []
    products = products_repository.get_products_map(list(cart) + list(wishlist))
    out["cartItems"] = [
        {"product": products.get(pid), "quantity": qty} for pid, qty in cart.items() if pid in products
    ]
    out["wishlistItems"] = [products[pid] for pid in wishlist if pid in products]
    return out

def update_profile(user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    columns = {
        "firstName": "first_name",
        "lastName": "last_name",
        "phoneNumber": "phone_number",
        "imageUrl": "image_url",
        "dob": "dob",
        "gender": "gender",
    }
    data = {columns[k]: v for k, v in changes.items() if k in columns and v is not None}
    if "dob" in data:
        data["dob"] = data["dob"].isoformat()
    if not data:
        raise ValidationError("Aucune donnée à mettre à jour")
    if "phone_number" in data:
        other = repository.get_user_by_phone(data["phone_number"])
        if other and str(other.get("id")) != str(user_id):
            raise ConflictError("Numéro de téléphone déjà enregistré")
    return public_user(_save(user_id, data))

def delete_account(user_id: str) -> None:
    if not repository.delete_user(user_id):
        raise NotFoundError("Utilisateur introuvable")

def list_customers() -> List[Dict[str, Any]]:
    return [public_user(u) for u in repository.list_customers()]

# --- Carnet d'adresses ---

def find_address(user: Dict[str, Any], address_id: Optional[str]) -> Optional[Dict[str, Any]]:
    if not address_id:
        return None
    for address in user.get("addresses") or []:
        if str(address.get("id")) == str(address_id):
            return address
    return None

def add_address(user_id: str, address: Dict[str, Any]) -> Dict[str, Any]:
    user = _require_user(user_id)
    entry = {"id": str(uuid4()), **address}
    addresses = list(user.get("addresses") or []) + [entry]
    return public_user(_save(user_id, {"addresses": addresses}))

def update_address(user_id: str, address_id: str, address: Dict[str, Any]) -> Dict[str, Any]:
    """Remplace le contenu d'une adresse en conservant son id (les commandes gardent leur copie)."""
    user = _require_user(user_id)
    if not find_address(user, address_id):
        raise NotFoundError("Adresse introuvable")
    addresses = [
        {"id": a.get("id"), **address} if str(a.get("id")) == str(address_id) else a
        for a in user.get("addresses") or []
    ]
    return public_user(_save(user_id, {"addresses": addresses}))

def remove_address(user_id: str, address_id: str) -> Dict[str, Any]:
    user = _require_user(user_id)
    if not find_address(user, address_id):
        raise NotFoundError("Adresse introuvable")
    addresses = [a for a in user.get("addresses") or [] if str(a.get("id")) != str(address_id)]
    return public_user(_save(user_id, {"addresses": addresses}))

# --- Panier / liste de souhaits ---

def add_to_cart(user_id: str, product_id: str) -> Dict[str, Any]:
    user = _require_user(user_id)
    if not products_repository.get_product(product_id):
        raise NotFoundError(f"Produit {product_id} introuvable")
    cart = cart_logic.add_item(user.get("cart") or {}, product_id)
    return public_user(_save(user_id, {"cart": cart}))

def remove_from_cart(user_id: str, product_id: str) -> Dict[str, Any]:
    user = _require_user(user_id)
    cart = cart_logic.decrement_item(user.get("cart") or {}, product_id)
    return public_user(_save(user_id, {"cart": cart}))

def clear_purchased(user: Dict[str, Any], product_ids: List[str]) -> Optional[dict]:
    """Retire du panier les produits commandés et persiste l'acheteur."""
    cart = cart_logic.remove_products(user.get("cart") or {}, product_ids)
    return repository.update_user(str(user.get("id")), {"cart": cart})

def add_to_wishlist(user_id: str, product_id: str) -> Dict[str, Any]:
    user = _require_user(user_id)
    wishlist = list(user.get("wishlist") or [])
    if product_id in wishlist:
        raise ConflictError("Produit déjà dans la liste de souhaits")
    wishlist.append(product_id)
    return public_user(_save(user_id, {"wishlist": wishlist}))

def remove_from_wishlist(user_id: str, product_id: str) -> Dict[str, Any]:
    user = _require_user(user_id)
    wishlist = [pid for pid in user.get("wishlist") or [] if pid != product_id]
    return public_user(_save(user_id, {"wishlist": wishlist}))
