"""
Verification link construction shared by the mailer adapters.
"""

from datetime import timedelta

from src.domain.auth import VERIFY_PATH
from src.domain.signing import SignatureService

VERIFICATION_TTL = timedelta(hours=24)


def port_suffix(port: int) -> str:
    """Return ":<port>", or "" for the default HTTP/HTTPS ports."""
    if port in (80, 443):
        return ""
    return f":{port}"


def verification_url(
    base_url: str,
    secret_key: str,
    port: int,
    user_id: str,
    ttl: timedelta = VERIFICATION_TTL,
) -> str:
    """Signed, expiring link to the verify endpoint for user_id."""
    return SignatureService(secret_key).temporary_signed_route(
        f"{base_url}{port_suffix(port)}", VERIFY_PATH, ttl, {"id": user_id}
    )
