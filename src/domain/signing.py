"""
Signed URLs - Stateless, unforgeable verification links.

A link is signed by computing HMAC-SHA256 over a canonical payload:

    <path>?<k1>=<v1>&<k2>=<v2>...&exp=<expiration>

Parameters are sorted by key and form-encoded (spaces as "+"). The "exp"
parameter is always pulled out of the map and appended last, so its
position in the caller's mapping never changes the signature.

Verification checks authenticity only. An elapsed expiration still
verifies; callers that want expiry enforced must compare the embedded
expiration against the clock after a successful check (see
is_expired()).
"""

import hashlib
import hmac
import time
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from urllib.parse import quote_plus, unquote_plus

EXPIRATION_PARAM = "exp"
SIGNATURE_PARAM = "sig"


def canonical_query(params: Mapping[str, str] | None, expiration: str = "") -> str:
    """Build the deterministic query string that is signed."""
    params = dict(params or {})
    embedded = params.pop(EXPIRATION_PARAM, "")
    expiration = expiration or embedded

    pairs = [f"{key}={quote_plus(params[key])}" for key in sorted(params)]
    if expiration:
        pairs.append(f"{EXPIRATION_PARAM}={quote_plus(expiration)}")
    return "&".join(pairs)


def canonical_payload(path: str, params: Mapping[str, str] | None, expiration: str = "") -> str:
    return f"{path}?{canonical_query(params, expiration)}"


def generate_signature(
    secret: str, path: str, params: Mapping[str, str] | None, expiration: str = ""
) -> str:
    """
    Sign (path, params, expiration) with the shared secret.

    Returns:
        Lowercase hex HMAC-SHA256 digest
    """
    payload = canonical_payload(path, params, expiration)
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def verify_signature(
    path: str,
    provided_signature: str,
    expiration: str,
    secret: str,
    params: Mapping[str, str] | None,
) -> bool:
    """
    Check a query-escaped signature against the recomputed one.

    Comparison is constant-time (hmac.compare_digest).
    """
    expected = generate_signature(secret, path, params, expiration)
    provided = unquote_plus(provided_signature)
    return hmac.compare_digest(provided.encode(), expected.encode())


def format_expiration(moment: datetime) -> str:
    """Serialize an expiration as Unix epoch seconds."""
    return str(int(moment.timestamp()))


def is_expired(expiration: str, now: datetime | None = None) -> bool:
    """
    True when the epoch-seconds expiration has elapsed.

    A value that is not an integer counts as expired.
    """
    try:
        deadline = int(expiration)
    except (TypeError, ValueError):
        return True
    current = now.timestamp() if now is not None else time.time()
    return current >= deadline


def signed_route(
    base_url: str,
    secret: str,
    path: str,
    params: Mapping[str, str] | None = None,
    expiration: datetime | None = None,
) -> str:
    """
    Build a full signed URL.

    Format: base_url + path + "?" + canonical query + "&sig=" + signature
    """
    expiration_str = format_expiration(expiration) if expiration is not None else ""
    signature = generate_signature(secret, path, params, expiration_str)
    query = canonical_query(params, expiration_str)
    return f"{base_url}{path}?{query}&{SIGNATURE_PARAM}={quote_plus(signature)}"


def temporary_signed_route(
    base_url: str,
    secret: str,
    path: str,
    duration: timedelta,
    params: Mapping[str, str] | None = None,
    now: datetime | None = None,
) -> str:
    """Signed URL whose expiration is now + duration."""
    now = now or datetime.now(timezone.utc)
    return signed_route(base_url, secret, path, params, now + duration)


class SignatureService:
    """
    Secret-bound facade over the signing functions.

    Holds the shared secret so callers only pass the route data.
    """

    def __init__(self, secret: str) -> None:
        self._secret = secret

    def sign(self, path: str, params: Mapping[str, str] | None, expiration: str = "") -> str:
        return generate_signature(self._secret, path, params, expiration)

    def verify(
        self,
        path: str,
        provided_signature: str,
        expiration: str,
        params: Mapping[str, str] | None,
    ) -> bool:
        return verify_signature(path, provided_signature, expiration, self._secret, params)

    def temporary_signed_route(
        self,
        base_url: str,
        path: str,
        duration: timedelta,
        params: Mapping[str, str] | None = None,
    ) -> str:
        return temporary_signed_route(base_url, self._secret, path, duration, params)
