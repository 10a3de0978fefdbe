"""
Taxonomie des erreurs métier de la boutique.

Chaque erreur est une HTTPException portant son code HTTP: les services lèvent,
les vues laissent remonter, et le handler commun (app_setup/exceptions.py) rend
{"detail": ...} en JSON.
"""
from typing import Optional
from fastapi import HTTPException


class StoreError(HTTPException):
    status_code = 500
    default_detail = "Erreur serveur"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class ValidationError(StoreError):
    status_code = 400
    default_detail = "Données invalides"


class ConflictError(StoreError):
    status_code = 400
    default_detail = "Ressource déjà existante"


class AuthenticationError(StoreError):
    status_code = 401
    default_detail = "Non authentifié"


class AuthorizationError(StoreError):
    status_code = 403
    default_detail = "Accès interdit"


class NotFoundError(StoreError):
    status_code = 404
    default_detail = "Ressource introuvable"


class InvalidTransitionError(StoreError):
    status_code = 409
    default_detail = "Transition de statut interdite"


class InvalidSignatureError(StoreError):
    status_code = 400
    default_detail = "Signature invalide"


class UpstreamError(StoreError):
    """Échec (ou timeout) de la passerelle de paiement."""
    status_code = 500
    default_detail = "Passerelle de paiement indisponible"


class PersistenceError(StoreError):
    """Échec de stockage; le détail interne n'est exposé qu'hors production."""
    status_code = 500
    default_detail = "Erreur de stockage"
