"""
Authentication domain service - Account lifecycle state machine.

This module contains the core business logic for registering accounts,
proving email ownership through signed links, and logging users in.

Account State Machine (Forward-Only Transitions)
================================================

States:
- UNVERIFIED: Initial state after registration (verified_at is null)
- VERIFIED: Terminal state after the signed link is followed

Valid Transitions:
    UNVERIFIED -> VERIFIED   (verify() with a valid signature)

Invalid Transitions (never allowed):
    VERIFIED -> any          (a second verify() is rejected, not ignored)

Login is only reachable from VERIFIED: the repository lookups used by
login() never return unverified accounts.

Every operation is a single synchronous unit of work. Nothing is retried
and nothing is compensated: if the verification mail fails after the user
row is persisted, register() fails and the row stays.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .exceptions import (
    AlreadyExists,
    BadRequest,
    DuplicateKeyError,
    InternalError,
    NotFound,
    RepositoryError,
    Unauthorized,
)
from .passwords import BcryptPasswordHasher
from .ports import AccountState, CredentialType, Mailer, PasswordHasher, UserRepository
from .requests import RegisterRequest, is_valid_email, normalize_email
from .signing import SignatureService, is_expired
from .tokens import TokenIssuer
from .user import User, generate_id

logger = logging.getLogger(__name__)

VERIFY_PATH = "/verify"

# Checked against when a login lookup misses so that unknown accounts
# and wrong passwords cost the same bcrypt work.
_DUMMY_PASSWORD = "dummy_password_for_timing_safety"


@dataclass(frozen=True)
class AuthServiceConfig:
    """Everything AuthService needs besides the repository."""

    signing_key: str
    secret_key: str
    mailer: Mailer
    token_expiration_hours: int = 72
    base_url: str = "http://localhost"
    server_port: int = 8080
    enforce_link_expiry: bool = False
    password_hasher: PasswordHasher = field(default_factory=BcryptPasswordHasher)
    dummy_hash: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Hashed once per configuration, never on the request path.
        object.__setattr__(self, "dummy_hash", self.password_hasher.hash(_DUMMY_PASSWORD))


@dataclass
class AuthService:
    """
    Domain service for registration, verification and login.

    Orchestrates validation, password hashing, persistence, verification
    mail delivery and token issuance.
    """

    repository: UserRepository
    config: AuthServiceConfig

    def __post_init__(self) -> None:
        self._token_issuer = TokenIssuer(
            self.config.signing_key, self.config.token_expiration_hours
        )
        self._signatures = SignatureService(self.config.secret_key)

    @property
    def _hasher(self) -> PasswordHasher:
        return self.config.password_hasher

    def register(self, request: RegisterRequest) -> User:
        """
        Register a new, unverified user and mail them a verification link.

        Args:
            request: Registration input

        Returns:
            The persisted user

        Raises:
            ValidationError: If the request is malformed (no side effects)
            AlreadyExists: If the email or username is taken
            InternalError: If hashing or persistence fails
            MailDeliveryError: If the link cannot be mailed; the user row
                is already persisted at that point
        """
        request.validate()

        try:
            password_hash = self._hasher.hash(request.password)
        except ValueError as e:
            raise InternalError("could not hash password") from e

        now = datetime.now(timezone.utc)
        user = User(
            id=generate_id(),
            first_name=request.first_name,
            last_name=request.last_name,
            username=request.username,
            email=normalize_email(request.email),
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

        try:
            self.repository.register(user)
        except DuplicateKeyError as e:
            raise AlreadyExists(e.field) from None
        except RepositoryError as e:
            raise InternalError("could not persist user") from e

        self.config.mailer.send_validate_account_mail(
            user.email,
            user.id,
            self.config.base_url,
            self.config.secret_key,
            self.config.server_port,
        )

        logger.info("Registered user %s", user.id)
        return user

    def verify(self, user_id: str, signature: str, expiration: str) -> None:
        """
        Mark a user verified after checking the signed link.

        Args:
            user_id: The link's "id" parameter
            signature: The link's "sig" parameter, possibly query-escaped
            expiration: The link's "exp" parameter

        Raises:
            BadRequest: If the signature is invalid, the link has expired
                (only when expiry enforcement is enabled) or the user is
                already verified
            NotFound: If no user has this id
            RepositoryError: If lookup or update fails
        """
        valid = self._signatures.verify(VERIFY_PATH, signature, expiration, {"id": user_id})
        if not valid:
            raise BadRequest("invalid verification link")

        if self.config.enforce_link_expiry and is_expired(expiration):
            raise BadRequest("verification link expired")

        user = self.repository.find_user_by_id(user_id)
        if user.state is AccountState.VERIFIED:
            raise BadRequest("user already verified")

        user.mark_verified(datetime.now(timezone.utc))
        self.repository.update(user)
        logger.info("Verified user %s", user.id)

    def login(
        self, credential: str, credential_type: CredentialType | str, password: str
    ) -> str:
        """
        Authenticate a verified user and issue a bearer token.

        All authentication failures raise the same Unauthorized error; the
        internal reason is only logged.

        Args:
            credential: Username or email
            credential_type: Which of the two the credential is
            password: Plaintext password

        Returns:
            Signed bearer token

        Raises:
            Unauthorized: On any authentication failure
            InternalError: If the token cannot be signed
        """
        user = self._authenticate(credential, credential_type, password)
        if user is None:
            raise Unauthorized()
        return self._token_issuer.issue(user)

    def _authenticate(
        self, credential: str, credential_type: CredentialType | str, password: str
    ) -> User | None:
        try:
            kind = CredentialType(credential_type)
        except ValueError:
            logger.info("Authentication failed: unknown credential type %r", credential_type)
            return None

        if kind is CredentialType.EMAIL:
            if not is_valid_email(credential):
                logger.info("Authentication failed: malformed email")
                return None
            credential = normalize_email(credential)

        try:
            if kind is CredentialType.EMAIL:
                user = self.repository.find_verified_user_by_email(credential)
            else:
                user = self.repository.find_verified_user_by_username(credential)
        except (NotFound, RepositoryError) as e:
            self._hasher.verify(password, self.config.dummy_hash)
            logger.info("Authentication failed for %s %r: %s", kind.value, credential, type(e).__name__)
            return None

        if not self._hasher.verify(password, user.password_hash):
            logger.info("Authentication failed for user %s: password mismatch", user.id)
            return None

        logger.info("Authentication successful for user %s", user.id)
        return user

