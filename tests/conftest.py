import copy
import hashlib
import hmac
import os
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

# Pas de Redis en tests: le limiter est désactivé au démarrage
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from backend import config
from backend.app import app as fastapi_app
from backend.auth.service import hash_password
from backend.payments.signatures import client_confirmation_message
from backend.utils.security import require_user, require_admin

KEY_SECRET = "test_key_secret"
WEBHOOK_SECRET = "test_webhook_secret"
JWT_SECRET = "test_jwt_secret"

BUYER_ID = "test-user"
ADMIN_ID = "admin-user-id"
ADDRESS_ID = "addr-1"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)


class FakeStore:
    """
    Stockage en mémoire qui remplace les repositories Supabase (users, products, orders).
    Les lignes sont copiées en entrée et en sortie, comme le ferait une vraie base.
    """

    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.products: Dict[str, dict] = {}
        self.orders: Dict[str, dict] = {}
        self._clock = 0

    # --- seeds ---
    def add_user(self, user_id: str, **fields) -> dict:
        row = {
            "id": user_id,
            "first_name": fields.pop("first_name", "Test"),
            "last_name": fields.pop("last_name", "User"),
            "email": fields.pop("email", None),
            "phone_number": fields.pop("phone_number", "9000000000"),
            "password": fields.pop("password", hash_password("Password1")),
            "is_admin": fields.pop("is_admin", False),
            "addresses": fields.pop("addresses", []),
            "cart": fields.pop("cart", {}),
            "wishlist": fields.pop("wishlist", []),
        }
        row.update(fields)
        self.users[user_id] = row
        return copy.deepcopy(row)

    def add_product(self, product_id: str, price, original_price=None, **fields) -> dict:
        row = {"id": product_id, "name": fields.pop("name", f"Plante {product_id}"), "price": price, "original_price": original_price}
        row.update(fields)
        self.products[product_id] = row
        return copy.deepcopy(row)

    def _now(self) -> str:
        self._clock += 1
        return datetime(2024, 1, 1, 0, 0, self._clock % 60, tzinfo=timezone.utc).isoformat()

    # --- users.repository ---
    def get_user_by_id(self, user_id):
        row = self.users.get(str(user_id)) if user_id else None
        return copy.deepcopy(row) if row else None

    def get_user_by_email(self, email):
        email = (email or "").strip().lower()
        for row in self.users.values():
            if email and (row.get("email") or "").lower() == email:
                return copy.deepcopy(row)
        return None

    def get_user_by_phone(self, phone_number):
        for row in self.users.values():
            if phone_number and row.get("phone_number") == phone_number:
                return copy.deepcopy(row)
        return None

    def list_customers(self, limit=500):
        return [copy.deepcopy(u) for u in self.users.values() if not u.get("is_admin")][:limit]

    def list_user_carts(self, batch_size=500, offset=0):
        rows = sorted(self.users.values(), key=lambda u: u["id"])
        return [{"id": u["id"], "cart": copy.deepcopy(u.get("cart"))} for u in rows[offset:offset + batch_size]]

    def create_user(self, data):
        self.users[data["id"]] = copy.deepcopy(data)
        return copy.deepcopy(data)

    def update_user(self, user_id, data):
        row = self.users.get(str(user_id))
        if not row:
            return None
        row.update(copy.deepcopy(data))
        return copy.deepcopy(row)

    def delete_user(self, user_id):
        return self.users.pop(str(user_id), None) is not None

    # --- products.repository ---
    def fetch_products_by_ids(self, ids):
        return [copy.deepcopy(self.products[i]) for i in ids if i in self.products]

    def get_product(self, product_id):
        row = self.products.get(str(product_id)) if product_id else None
        return copy.deepcopy(row) if row else None

    def list_products(self, category_id=None):
        return [copy.deepcopy(p) for p in self.products.values() if not category_id or p.get("category_id") == category_id]

    # --- orders.repository ---
    def insert_order(self, row):
        stored = copy.deepcopy(row)
        stored.setdefault("created_at", self._now())
        stored.setdefault("delivery_date", None)
        stored.setdefault("razorpay_order", None)
        stored.setdefault("razorpay_payment_id", None)
        stored.setdefault("razorpay_signature", None)
        self.orders[stored["id"]] = stored
        return copy.deepcopy(stored)

    def get_order(self, order_id, with_user=False):
        row = self.orders.get(str(order_id))
        if not row:
            return None
        out = copy.deepcopy(row)
        if with_user:
            buyer = self.users.get(out["user_id"]) or {}
            out["users"] = {k: buyer.get(k) for k in ("id", "first_name", "last_name", "email", "phone_number")}
        return out

    def list_orders(self, limit=200):
        rows = sorted(self.orders.values(), key=lambda o: o["created_at"], reverse=True)
        return [copy.deepcopy(o) for o in rows[:limit]]

    def list_user_orders(self, user_id):
        return [copy.deepcopy(o) for o in self.list_orders() if o["user_id"] == user_id]

    def find_by_gateway_order_id(self, gateway_order_id):
        for row in self.orders.values():
            if (row.get("razorpay_order") or {}).get("id") == gateway_order_id:
                return copy.deepcopy(row)
        return None

    def update_order(self, order_id, data):
        row = self.orders.get(str(order_id))
        if not row:
            return None
        row.update(copy.deepcopy(data))
        return copy.deepcopy(row)

    def delete_pending_order(self, order_id):
        row = self.orders.get(str(order_id))
        if not row or row.get("status") != "pending":
            return False
        del self.orders[str(order_id)]
        return True


class FakeGateway:
    """Passerelle factice: enregistre les appels et renvoie une session déterministe."""

    def __init__(self, fail: Optional[Exception] = None):
        self.calls: List[Dict[str, Any]] = []
        self.fail = fail

    def create_session(self, amount_minor, currency, receipt):
        self.calls.append({"amount": amount_minor, "currency": currency, "receipt": receipt})
        if self.fail is not None:
            raise self.fail
        return {"sessionId": f"order_test_{len(self.calls)}", "amount": amount_minor, "currency": currency}


def compute_signature(secret: str, message: bytes) -> str:
    """Signe comme la passerelle: HMAC-SHA256 hex."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

def client_signature(gateway_order_id: str, payment_id: str, secret: str = KEY_SECRET) -> str:
    return compute_signature(secret, client_confirmation_message(gateway_order_id, payment_id))


@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Secrets déterministes (les services lisent backend.config à l'appel)
@pytest.fixture(autouse=True)
def _test_config(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET", JWT_SECRET)
    monkeypatch.setattr(config, "RAZORPAY_KEY_SECRET", KEY_SECRET)
    monkeypatch.setattr(config, "RAZORPAY_WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setattr(config, "IS_PRODUCTION", False)

# Aucun accès Supabase réel: clients neutralisés + repositories branchés sur FakeStore
@pytest.fixture(autouse=True)
def store(monkeypatch) -> FakeStore:
    fake = FakeStore()
    monkeypatch.setattr("backend.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("backend.infra.supabase_client.get_service_supabase", lambda: MagicMock())

    for name in (
        "get_user_by_id", "get_user_by_email", "get_user_by_phone", "list_customers",
        "list_user_carts", "create_user", "update_user", "delete_user",
    ):
        monkeypatch.setattr(f"backend.users.repository.{name}", getattr(fake, name))
    for name in ("fetch_products_by_ids", "get_product", "list_products"):
        monkeypatch.setattr(f"backend.products.repository.{name}", getattr(fake, name))
    for name in (
        "insert_order", "get_order", "list_orders", "list_user_orders",
        "find_by_gateway_order_id", "update_order", "delete_pending_order",
    ):
        monkeypatch.setattr(f"backend.orders.repository.{name}", getattr(fake, name))
    return fake

@pytest.fixture()
def buyer(store) -> dict:
    """Acheteur avec une adresse dans son carnet et un panier non vide."""
    return store.add_user(
        BUYER_ID,
        email="buyer@example.com",
        phone_number="9876543210",
        addresses=[{
            "id": ADDRESS_ID,
            "addressLine": "12 MG Road",
            "city": "Pune",
            "state": "MH",
            "pinCode": 411001,
            "alternativeAddress": None,
            "alternativeContact": None,
        }],
        cart={"P1": 2, "P9": 1},
    )

@pytest.fixture()
def fake_gateway(app) -> Generator[FakeGateway, None, None]:
    gateway = FakeGateway()
    previous = getattr(app.state, "gateway", None)
    app.state.gateway = gateway
    try:
        yield gateway
    finally:
        app.state.gateway = previous

# Simuler un utilisateur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    fake_user: Dict[str, Any] = {"id": BUYER_ID, "is_admin": False, "token": "fake-token"}
    app.dependency_overrides[require_user] = lambda: fake_user
    try:
        yield
    finally:
        app.dependency_overrides.pop(require_user, None)

@pytest.fixture
def admin_client(app, client):
    """Client dont l'identité est un admin (require_user et require_admin surchargés)."""
    admin_user = {"id": ADMIN_ID, "is_admin": True, "token": "fake-admin-token"}
    app.dependency_overrides[require_user] = lambda: admin_user
    app.dependency_overrides[require_admin] = lambda: admin_user
    yield client
    app.dependency_overrides.pop(require_admin, None)

@pytest.fixture
def real_auth(app):
    """Désactive les surcharges: les routes exigent un vrai jeton Bearer."""
    app.dependency_overrides.pop(require_user, None)
    app.dependency_overrides.pop(require_admin, None)
    yield
