"""
User Models for CashMind

CRITICAL: Passwords are never stored in plaintext.
A UserCredential only ever carries a pbkdf2_sha256 hash; the raw
password exists just long enough to be hashed or verified.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from passlib.hash import pbkdf2_sha256 as hasher
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cashmind.models.expense import utc_now


def hash_password(raw: str) -> str:
    """Hash and salt a raw password for storage."""
    return hasher.hash(raw)


class UserCredential(BaseModel):
    """
    A locally stored account.

    Created once at sign-up; never updated or deleted.
    Username uniqueness is not enforced.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique credential ID"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the account was created"
    )
    username: str = Field(
        ...,
        description="Login name"
    )
    password_hash: str = Field(
        ...,
        repr=False,
        description="pbkdf2_sha256 hash of the password"
    )
    email: str = Field(
        default="",
        description="Contact email"
    )

    @field_validator('password_hash')
    @classmethod
    def reject_plaintext(cls, v: str) -> str:
        """Refuse anything that is not a hash we can verify."""
        if not hasher.identify(v):
            raise ValueError("password_hash must be a pbkdf2_sha256 hash, not a raw password")
        return v

    def verify_password(self, raw: str) -> bool:
        return hasher.verify(raw, self.password_hash)


class UserProfile(BaseModel):
    """Profile returned by GET /userProfile."""

    id: UUID
    name: str
    email: str


class AuthOutcome(BaseModel):
    """
    Result of a sign-in or sign-up attempt.

    error_message is one of a small set of fixed, user-facing strings.
    """

    authenticated: bool
    error_message: Optional[str] = None
    username: Optional[str] = None
    # Sign-up only: did the remote API accept the registration?
    remote_registered: Optional[bool] = None
