"""
SMTP mailer adapter - Implements Mailer protocol.

Renders the HTML verification template and delivers it with smtplib.
"""

import logging
import smtplib
from datetime import datetime, timedelta, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from string import Template

from src.domain.exceptions import MailDeliveryError

from .links import VERIFICATION_TTL, verification_url

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
VERIFY_SUBJECT = "Please verify your email address."


class SmtpMailer:
    """
    Implements Mailer protocol over SMTP.

    Uses structural subtyping - no explicit inheritance from Protocol.
    STARTTLS and login are used only when credentials are configured.
    """

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        from_name: str = "",
        username: str = "",
        password: str = "",
        ttl: timedelta = VERIFICATION_TTL,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.from_email = from_email
        self.from_name = from_name
        self.username = username
        self.password = password
        self.ttl = ttl
        self.timeout = timeout

    def send_validate_account_mail(
        self, email: str, user_id: str, base_url: str, secret_key: str, port: int
    ) -> None:
        """
        Mail the signed verification link to a newly registered user.

        Raises:
            MailDeliveryError: If the template is missing or SMTP fails
        """
        url = verification_url(base_url, secret_key, port, user_id, self.ttl)
        data = {"url": url, "year": datetime.now(timezone.utc).year}
        self.send_mail(email, VERIFY_SUBJECT, "verify_email.html", data)

    def send_mail(self, to: str, subject: str, template_name: str, data: dict) -> None:
        """
        Render template_name with data and send it as an HTML email.

        Raises:
            MailDeliveryError: If rendering or delivery fails
        """
        try:
            body = Template((TEMPLATE_DIR / template_name).read_text()).substitute(data)
        except (OSError, KeyError, ValueError) as e:
            raise MailDeliveryError(f"error rendering template {template_name}") from e

        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self.from_name} <{self.from_email}>" if self.from_name else self.from_email
        message["To"] = to
        message.attach(MIMEText(body, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.username and self.password:
                    server.starttls()
                    server.login(self.username, self.password)
                server.sendmail(self.from_email, [to], message.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send %r to %s: %s", subject, to, e)
            raise MailDeliveryError("could not send verification email") from e

        logger.info("Sent %r to %s", subject, to)
