import re

MAX_PASSWORD_BYTES = 72

_PASSWORD_RULES = (
    (r"[A-Za-z]", "une lettre"),
    (r"\d", "un chiffre"),
)

def validate_password_strength(v: str) -> str:
    """Au moins 8 caractères, une lettre et un chiffre; 72 octets UTF-8 au plus (limite bcrypt)."""
    if len(v or "") < 8:
        raise ValueError("Le mot de passe doit contenir au moins 8 caractères")
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Le mot de passe ne doit pas dépasser {MAX_PASSWORD_BYTES} octets")
    missing = [label for pattern, label in _PASSWORD_RULES if not re.search(pattern, v)]
    if missing:
        raise ValueError("Le mot de passe doit contenir au moins " + " et ".join(missing))
    return v

def validate_phone_number(v: str) -> str:
    """Numéro normalisé: chiffres uniquement (espaces/tirets retirés), 10 à 13 chiffres, '+' initial toléré."""
    cleaned = re.sub(r"[\s\-]", "", v or "")
    if not re.fullmatch(r"\+?\d{10,13}", cleaned):
        raise ValueError("Numéro de téléphone invalide")
    return cleaned
