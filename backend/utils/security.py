from fastapi import Request, Depends
from typing import Dict, Any
from backend.utils.errors import AuthenticationError, AuthorizationError

def get_current_user(request: Request) -> Dict[str, Any]:
    # Bearer uniquement: l'identité et le drapeau admin viennent du JWT
    auth_header = request.headers.get("Authorization", "")
    token = auth_header[7:].strip() if auth_header.startswith("Bearer ") else ""
    if not token:
        raise AuthenticationError("Non authentifié")

    from backend.auth.service import decode_token
    return decode_token(token)

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user

def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if not user.get("is_admin"):
        raise AuthorizationError("Accès interdit")
    return user

def is_owner_or_admin(user: Dict[str, Any], owner_id: Any) -> bool:
    return bool(user.get("is_admin")) or str(user.get("id")) == str(owner_id)

def ensure_owner_or_admin(user: Dict[str, Any], owner_id: Any) -> None:
    """Lève AuthorizationError si l'appelant n'est ni propriétaire ni admin."""
    if not is_owner_or_admin(user, owner_id):
        raise AuthorizationError("Non autorisé")
