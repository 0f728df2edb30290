"""
Transient inputs - Registration requests and login credentials.

Validation happens here, before any input reaches AuthService side effects.
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from .exceptions import ValidationError
from .ports import CredentialType

MAX_FIELD_LENGTH = 128


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    """Syntactic check only, no DNS lookup."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


@dataclass(frozen=True)
class RegisterRequest:
    """Registration input. The plaintext password is never persisted."""

    first_name: str
    last_name: str
    username: str
    password: str
    email: str

    def validate(self) -> None:
        """
        Check required fields, lengths and email syntax.

        Raises:
            ValidationError: Listing every offending field
        """
        errors: dict[str, str] = {}
        for field in ("first_name", "last_name", "username", "password", "email"):
            value = getattr(self, field)
            if not value:
                errors[field] = "cannot be blank"
            elif len(value) > MAX_FIELD_LENGTH:
                errors[field] = f"the length must be no more than {MAX_FIELD_LENGTH}"

        if "email" not in errors and not is_valid_email(self.email.strip()):
            errors["email"] = "must be a valid email address"

        if errors:
            raise ValidationError(errors)


@dataclass(frozen=True)
class Credential:
    """Login identifier: exactly one of username or email, tagged by type."""

    type: CredentialType
    value: str

    @classmethod
    def from_fields(cls, username: str | None, email: str | None) -> "Credential":
        """
        Build a credential from the two optional login fields.

        Raises:
            ValidationError: If neither or both fields are present
        """
        if not username and not email:
            raise ValidationError({"credential": "username or email is required"})
        if username and email:
            raise ValidationError({"credential": "only one of username or email is allowed"})
        if email:
            return cls(CredentialType.EMAIL, email)
        return cls(CredentialType.USERNAME, username)
