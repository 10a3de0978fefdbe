# module backend.users.views

"""API JSON du domaine Utilisateurs (/api/user).
- Comptes: inscription, connexion (rate limit), profil, mot de passe, suppression
- Carnet d'adresses, panier et liste de souhaits
Les routes paramétrées par {user_id} sont réservées au propriétaire ou à un admin.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from backend.utils.rate_limit import optional_rate_limit
from backend.utils.security import require_user, require_admin, ensure_owner_or_admin
from . import service
from .models import (
    AddressIn,
    ChangePasswordRequest,
    LoginRequest,
    ProductRefRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)

api_router = APIRouter(prefix="/api/user", tags=["Users API"])

@api_router.post("/register", status_code=201, dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def register(req: RegisterRequest):
    """Crée un compte client et retourne {token, user} (201). 400 si téléphone/email déjà pris."""
    return service.register(
        first_name=req.firstName,
        last_name=req.lastName,
        email=req.email,
        phone_number=req.phoneNumber,
        password=req.password,
    )

@api_router.post("/login", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def login(req: LoginRequest):
    """Connexion par email ou téléphone. 401 si identifiants invalides."""
    return service.login(req.identifier, req.password)

@api_router.get("")
def list_users(admin: Dict[str, Any] = Depends(require_admin)):
    return {"users": service.list_customers()}

@api_router.get("/profile/{user_id}")
def get_profile(user_id: str, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    return {"user": service.get_profile(user_id)}

@api_router.put("/profile/{user_id}")
def update_profile(user_id: str, req: ProfileUpdateRequest, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    return {"message": "Profil mis à jour", "user": service.update_profile(user_id, req.model_dump(exclude_none=True))}

@api_router.put("/change-password/{user_id}")
def change_password(user_id: str, req: ChangePasswordRequest, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    service.change_password(user_id, req.currentPassword, req.newPassword)
    return {"message": "Mot de passe modifié"}

@api_router.delete("/{user_id}")
def delete_user(user_id: str, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    service.delete_account(user_id)
    return {"message": "Utilisateur supprimé"}

# --- Carnet d'adresses ---

@api_router.post("/address/{user_id}", status_code=201)
def add_address(user_id: str, req: AddressIn, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    return {"message": "Adresse ajoutée", "user": service.add_address(user_id, req.model_dump())}

@api_router.put("/address/{user_id}/{address_id}")
def update_address(user_id: str, address_id: str, req: AddressIn, user: Dict[str, Any] = Depends(require_user)):
    """Modifie l'adresse en place; les commandes existantes gardent leur copie figée."""
    ensure_owner_or_admin(user, user_id)
    return {"message": "Adresse mise à jour", "user": service.update_address(user_id, address_id, req.model_dump())}

@api_router.delete("/address/{user_id}/{address_id}")
def remove_address(user_id: str, address_id: str, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    return {"message": "Adresse supprimée", "user": service.remove_address(user_id, address_id)}

# --- Panier / liste de souhaits ---

@api_router.post("/cart/{user_id}")
def add_to_cart(user_id: str, req: ProductRefRequest, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    return {"message": "Produit ajouté au panier", "user": service.add_to_cart(user_id, req.productId)}

@api_router.delete("/cart/{user_id}")
def remove_from_cart(user_id: str, req: ProductRefRequest, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    return {"message": "Produit retiré du panier", "user": service.remove_from_cart(user_id, req.productId)}

@api_router.post("/wishlist/{user_id}")
def add_to_wishlist(user_id: str, req: ProductRefRequest, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    return {"message": "Produit ajouté à la liste de souhaits", "user": service.add_to_wishlist(user_id, req.productId)}

@api_router.delete("/wishlist/{user_id}")
def remove_from_wishlist(user_id: str, req: ProductRefRequest, user: Dict[str, Any] = Depends(require_user)):
    ensure_owner_or_admin(user, user_id)
    return {"message": "Produit retiré de la liste de souhaits", "user": service.remove_from_wishlist(user_id, req.productId)}
