"""
Bearer token issuance - HS256 JWTs via PyJWT.

Only issuance lives here; validating tokens on protected routes is the
concern of whoever consumes them.
"""

from datetime import datetime, timedelta, timezone

import jwt

from .exceptions import InternalError
from .ports import Identity

ALGORITHM = "HS256"


class TokenIssuer:
    """Signs {id, email, exp} claim sets with a shared signing key."""

    def __init__(self, signing_key: str, validity_hours: int) -> None:
        self._signing_key = signing_key
        self.validity_hours = validity_hours

    def issue(self, identity: Identity, now: datetime | None = None) -> str:
        """
        Issue a signed token for the identity.

        Claims:
            id: identity.get_id()
            email: identity.get_email()
            exp: now + validity_hours, as epoch seconds

        Raises:
            InternalError: If the token cannot be signed
        """
        now = now or datetime.now(timezone.utc)
        claims = {
            "id": identity.get_id(),
            "email": identity.get_email(),
            "exp": int((now + timedelta(hours=self.validity_hours)).timestamp()),
        }
        try:
            return jwt.encode(claims, self._signing_key, algorithm=ALGORITHM)
        except (jwt.PyJWTError, TypeError) as e:
            raise InternalError("could not sign token") from e
