"""
Test doubles for the Mailer port and shared test constants.
"""

from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlsplit

from src.adapters.smtp.links import verification_url
from src.domain.exceptions import MailDeliveryError

SIGNING_KEY = "signingKey"
SECRET_KEY = "secretKey"


@dataclass
class SentMail:
    email: str
    user_id: str
    url: str

    @property
    def query(self) -> dict[str, str]:
        """Link query parameters, decoded."""
        return {k: v[0] for k, v in parse_qs(urlsplit(self.url).query).items()}


@dataclass
class RecordingMailer:
    """Mailer fake that builds the real signed link and keeps it."""

    sent: list[SentMail] = field(default_factory=list)

    def send_validate_account_mail(
        self, email: str, user_id: str, base_url: str, secret_key: str, port: int
    ) -> None:
        url = verification_url(base_url, secret_key, port, user_id)
        self.sent.append(SentMail(email=email, user_id=user_id, url=url))

    @property
    def last(self) -> SentMail:
        return self.sent[-1]


class FailingMailer:
    """Mailer fake whose transport is always down."""

    def send_validate_account_mail(
        self, email: str, user_id: str, base_url: str, secret_key: str, port: int
    ) -> None:
        raise MailDeliveryError("smtp unavailable")
