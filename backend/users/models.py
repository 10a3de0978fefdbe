from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from backend.utils.validators import validate_password_strength, validate_phone_number


class RegisterRequest(BaseModel):
    firstName: str = Field(min_length=1)
    lastName: Optional[str] = None
    email: Optional[EmailStr] = None
    phoneNumber: str
    password: str

    @field_validator("phoneNumber")
    def phone_format(cls, v: str) -> str:
        return validate_phone_number(v)

    @field_validator("password")
    def password_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    currentPassword: str = Field(min_length=1)
    newPassword: str

    @field_validator("newPassword")
    def password_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class ProfileUpdateRequest(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None
    imageUrl: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[str] = None

    @field_validator("phoneNumber")
    def phone_format(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone_number(v) if v is not None else v


class AddressIn(BaseModel):
    addressLine: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    pinCode: int
    alternativeAddress: Optional[str] = None
    alternativeContact: Optional[str] = None


class ProductRefRequest(BaseModel):
    productId: str = Field(min_length=1)


# Colonnes users -> clés JSON publiques (jamais le hash du mot de passe)
_PUBLIC_FIELDS = {
    "id": "_id",
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone_number": "phoneNumber",
    "image_url": "imageUrl",
    "dob": "dob",
    "gender": "gender",
    "addresses": "address",
    "cart": "cart",
    "wishlist": "wishlist",
    "is_admin": "isAdmin",
}

def public_user(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not row:
        return None
    out = {key: row.get(col) for col, key in _PUBLIC_FIELDS.items()}
    out["address"] = out["address"] or []
    out["cart"] = out["cart"] or {}
    out["wishlist"] = out["wishlist"] or []
    out["isAdmin"] = bool(out["isAdmin"])
    return out
