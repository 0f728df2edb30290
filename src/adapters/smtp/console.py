"""
Console mailer adapter - Implements Mailer protocol.

This module provides a console-based implementation of the domain's
mailer port, logging verification links for development use.
"""

import logging
from datetime import timedelta

from .links import VERIFICATION_TTL, verification_url

logger = logging.getLogger(__name__)


class ConsoleMailer:
    """
    Implements Mailer protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - the link is logged instead of mailed.
    """

    def __init__(self, ttl: timedelta = VERIFICATION_TTL) -> None:
        self.ttl = ttl

    def send_validate_account_mail(
        self, email: str, user_id: str, base_url: str, secret_key: str, port: int
    ) -> None:
        """
        Log the verification link at INFO level (simulates email delivery).

        Args:
            email: Recipient email address
            user_id: Id embedded in the signed link
            base_url: Public base URL
            secret_key: Link signing secret
            port: Public port
        """
        url = verification_url(base_url, secret_key, port, user_id, self.ttl)
        logger.info("[VERIFICATION] Email: %s Link: %s", email, url)
