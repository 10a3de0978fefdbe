# backend.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, JWT, Razorpay)
- Expose les réglages de résilience de la passerelle (retries, timeouts)
- Sécurité: CORS/hosts, HSTS
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name)) or default)
    except ValueError:
        return default

def _float_env(name: str, default: float) -> float:
    try:
        return float(_clean_env(os.getenv(name)) or default)
    except ValueError:
        return default

# Environnement: "production" masque les détails internes des erreurs 500
APP_ENV = _clean_env(os.getenv("APP_ENV") or "development").lower()
IS_PRODUCTION = APP_ENV == "production"

# Supabase: URL et clés (anon pour les lectures publiques, service pour les écritures serveur)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# JWT: jetons Bearer émis à l'inscription/connexion
JWT_SECRET = _clean_env(os.getenv("JWT_SECRET") or "")
JWT_ALGORITHM = _clean_env(os.getenv("JWT_ALGORITHM") or "HS256")
JWT_EXPIRES_DAYS = _int_env("JWT_EXPIRES_DAYS", 7)

# Razorpay: deux secrets distincts (flux client vs webhook)
RAZORPAY_KEY_ID = _clean_env(os.getenv("RAZORPAY_KEY_ID") or "")
RAZORPAY_KEY_SECRET = _clean_env(os.getenv("RAZORPAY_KEY_SECRET") or "")
RAZORPAY_WEBHOOK_SECRET = _clean_env(os.getenv("RAZORPAY_WEBHOOK_SECRET") or "")
PAYMENT_CURRENCY = _clean_env(os.getenv("PAYMENT_CURRENCY") or "INR")

# Résilience passerelle: retries bornés + backoff, timeout par appel
GATEWAY_MAX_RETRIES = _int_env("GATEWAY_MAX_RETRIES", 2)
GATEWAY_RETRY_BACKOFF = _float_env("GATEWAY_RETRY_BACKOFF", 0.5)
GATEWAY_TIMEOUT = _float_env("GATEWAY_TIMEOUT", 10.0)
WEBHOOK_TIMEOUT = _float_env("WEBHOOK_TIMEOUT", 10.0)

# Sécurité HTTP
ENABLE_HSTS = (os.getenv("ENABLE_HSTS", "false").lower() == "true")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]
