"""Service d'authentification: hachage des mots de passe (bcrypt) et jetons Bearer (JWT).
- hash_password / verify_password: bcrypt avec coût 10.
- issue_token: JWT HS256 {id, isAdmin, exp} valable JWT_EXPIRES_DAYS jours.
- decode_token: vérifie signature + expiration et normalise l'identité {id, is_admin}.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
import logging

import bcrypt
import jwt

from backend import config
from backend.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10

def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # hash stocké corrompu / non bcrypt
        logger.warning("auth.verify_password: hash invalide")
        return False

def _secret() -> str:
    if not config.JWT_SECRET:
        raise RuntimeError("JWT_SECRET manquant")
    return config.JWT_SECRET

def issue_token(user: Dict[str, Any]) -> str:
    """Émet un JWT pour l'utilisateur (ligne table users)."""
    now = datetime.now(timezone.utc)
    claims = {
        "id": str(user.get("id")),
        "isAdmin": bool(user.get("is_admin")),
        "iat": now,
        "exp": now + timedelta(days=config.JWT_EXPIRES_DAYS),
    }
    return jwt.encode(claims, _secret(), algorithm=config.JWT_ALGORITHM)

def decode_token(token: str) -> Dict[str, Any]:
    """
    Décode un JWT Bearer.
    Retour: {"id": str, "is_admin": bool, "token": str}
    Erreurs: AuthenticationError si expiré, falsifié ou incomplet.
    """
    try:
        claims = jwt.decode(token, _secret(), algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expirée, veuillez vous connecter")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Jeton invalide")
    user_id = claims.get("id")
    if not user_id:
        raise AuthenticationError("Jeton invalide")
    return {"id": str(user_id), "is_admin": bool(claims.get("isAdmin")), "token": token}
