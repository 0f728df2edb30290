"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols structurally.
"""

from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .user import User


class AccountState(str, Enum):
    """
    Account lifecycle states.

    State Transitions (forward-only):
    - UNVERIFIED -> VERIFIED (successful email verification)

    VERIFIED is terminal. Login is only reachable from VERIFIED.
    """

    UNVERIFIED = "UNVERIFIED"
    VERIFIED = "VERIFIED"


class CredentialType(str, Enum):
    """Which login identifier a credential carries."""

    USERNAME = "username"
    EMAIL = "email"


class Identity(Protocol):
    """Anything exposing an id and an email can be issued a token."""

    def get_id(self) -> str: ...

    def get_email(self) -> str: ...


class UserRepository(Protocol):
    """Port interface for user persistence."""

    def register(self, user: "User") -> None:
        """
        Persist a new user.

        Raises:
            DuplicateKeyError: If the email or username is already taken
                (field identifies which)
            RepositoryError: On any other persistence failure
        """
        ...

    def find_user_by_id(self, user_id: str) -> "User":
        """
        Return the user with the given id, verified or not.

        Raises:
            NotFound: If no such user exists
            RepositoryError: On persistence failure
        """
        ...

    def find_verified_user_by_email(self, email: str) -> "User":
        """
        Return the verified user with the given email.

        Unverified users are never returned; they raise NotFound.
        """
        ...

    def find_verified_user_by_username(self, username: str) -> "User":
        """
        Return the verified user with the given username.

        Unverified users are never returned; they raise NotFound.
        """
        ...

    def update(self, user: "User") -> None:
        """Persist changes to an existing user."""
        ...


class Mailer(Protocol):
    """Port interface for verification mail delivery."""

    def send_validate_account_mail(
        self, email: str, user_id: str, base_url: str, secret_key: str, port: int
    ) -> None:
        """
        Build the signed 24-hour verification link and deliver it.

        Args:
            email: Recipient email address
            user_id: Id embedded in the link
            base_url: Public base URL of the service
            secret_key: Secret used to sign the link
            port: Public port, omitted from the link when 80 or 443

        Raises:
            MailDeliveryError: If the mail cannot be delivered
        """
        ...


class PasswordHasher(Protocol):
    """Port interface for one-way password hashing."""

    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, hashed: str) -> bool: ...
