"""
Domain layer - Pure business logic with no web or database framework imports.

This package contains the identity subsystem's core: the signed-link
protocol, the account lifecycle state machine and token issuance. It
defines its own port interfaces for infrastructure abstraction.
"""

from .auth import AuthService, AuthServiceConfig
from .exceptions import (
    AlreadyExists,
    AuthError,
    BadRequest,
    DuplicateKeyError,
    InternalError,
    MailDeliveryError,
    NotFound,
    RepositoryError,
    Unauthorized,
    ValidationError,
)
from .passwords import BcryptPasswordHasher
from .ports import AccountState, CredentialType, Identity, Mailer, PasswordHasher, UserRepository
from .requests import Credential, RegisterRequest
from .signing import SignatureService
from .tokens import TokenIssuer
from .user import User, generate_id

__all__ = [
    "AccountState",
    "AlreadyExists",
    "AuthError",
    "AuthService",
    "AuthServiceConfig",
    "BadRequest",
    "BcryptPasswordHasher",
    "Credential",
    "CredentialType",
    "DuplicateKeyError",
    "Identity",
    "InternalError",
    "MailDeliveryError",
    "Mailer",
    "NotFound",
    "PasswordHasher",
    "RegisterRequest",
    "RepositoryError",
    "SignatureService",
    "TokenIssuer",
    "Unauthorized",
    "User",
    "UserRepository",
    "ValidationError",
    "generate_id",
]
