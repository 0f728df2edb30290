"""
User entity - Identity record and lifecycle helpers.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from .ports import AccountState


def generate_id() -> str:
    """Generate a new opaque, unique user id (UUID4 string)."""
    return str(uuid.uuid4())


@dataclass
class User:
    """
    Identity record.

    verified_at is None while the account is pending verification and is
    set exactly once by mark_verified(). Satisfies the Identity protocol.
    """

    id: str
    first_name: str
    last_name: str
    username: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    verified_at: datetime | None = None

    def get_id(self) -> str:
        return self.id

    def get_email(self) -> str:
        return self.email

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None

    @property
    def state(self) -> AccountState:
        return AccountState.VERIFIED if self.is_verified else AccountState.UNVERIFIED

    def mark_verified(self, now: datetime) -> None:
        """
        Transition UNVERIFIED -> VERIFIED.

        Raises:
            ValueError: If the user is already verified
        """
        if self.verified_at is not None:
            raise ValueError("user already verified")
        self.verified_at = now
        self.updated_at = now
