from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from backend.app_setup.exceptions import register_exception_handlers
from backend.auth.service import decode_token, hash_password, issue_token, verify_password
from backend.utils.errors import AuthenticationError
from backend.utils.security import get_current_user, require_admin, is_owner_or_admin
from conftest import JWT_SECRET

def _make_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/me")
    def me(user=Depends(get_current_user)):
        return user

    @app.get("/admin")
    def admin(user=Depends(require_admin)):
        return {"ok": True}

    return app

def test_password_hash_roundtrip():
    hashed = hash_password("Password1")
    assert hashed.startswith("$2")
    assert verify_password("Password1", hashed)
    assert not verify_password("Password2", hashed)
    assert not verify_password("Password1", "not-a-bcrypt-hash")

def test_token_claims():
    token = issue_token({"id": "u1", "is_admin": True})
    claims = jwt.decode(token, JWT_SECRET, algorithms=["HS256"])
    assert claims["id"] == "u1"
    assert claims["isAdmin"] is True
    assert decode_token(token) == {"id": "u1", "is_admin": True, "token": token}

def test_expired_and_forged_tokens_rejected():
    expired = jwt.encode({"id": "u1", "exp": datetime.now(timezone.utc) - timedelta(seconds=5)}, JWT_SECRET, algorithm="HS256")
    with pytest.raises(AuthenticationError):
        decode_token(expired)
    forged = jwt.encode({"id": "u1"}, "other-secret", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        decode_token(forged)

def test_get_current_user_requires_bearer():
    client = TestClient(_make_app())
    assert client.get("/me").status_code == 401
    assert client.get("/me", headers={"Authorization": "Basic abc"}).status_code == 401

    token = issue_token({"id": "u1", "is_admin": False})
    r = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["id"] == "u1"

def test_require_admin():
    client = TestClient(_make_app())
    user_token = issue_token({"id": "u1", "is_admin": False})
    admin_token = issue_token({"id": "a1", "is_admin": True})
    assert client.get("/admin", headers={"Authorization": f"Bearer {user_token}"}).status_code == 403
    assert client.get("/admin", headers={"Authorization": f"Bearer {admin_token}"}).status_code == 200

def test_owner_or_admin():
    assert is_owner_or_admin({"id": "u1", "is_admin": False}, "u1")
    assert is_owner_or_admin({"id": "a1", "is_admin": True}, "u1")
    assert not is_owner_or_admin({"id": "u2", "is_admin": False}, "u1")
