"""Pydantic schemas for registration, login and user profiles."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class AddressIn(BaseModel):
    """Postal address supplied at registration."""

    street: str = Field(min_length=1, max_length=200)
    number: str = Field(min_length=1, max_length=20)
    complement: str | None = Field(default=None, max_length=120)
    district: str = Field(min_length=1, max_length=120)
    city: str = Field(min_length=1, max_length=120)
    state: str = Field(min_length=2, max_length=60)
    postal_code: str = Field(min_length=5, max_length=12)


class RegisterDTO(BaseModel):
    """Schema for creating a customer account.

    Attributes:
        name: Display name.
        email: Login email; normalized to lowercase.
        password: Plain password, at least 6 characters.
        phone: Contact phone.
        address: Postal address for deliveries.
    """

    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    phone: str = Field(min_length=8, max_length=32)
    address: AddressIn

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginDTO(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserOut(BaseModel):
    """Public profile returned by the API (never includes the password)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: int
    name: str
    email: str
    role: str
    phone: str
    address: dict
    created_at: datetime | None = None

    @field_validator("role", mode="before")
    @classmethod
    def role_value(cls, v):
        return getattr(v, "value", v)
