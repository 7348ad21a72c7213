from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import formataddr

import structlog

from ticketing.core.config import settings
from ticketing.services.interfaces import Mailer

logger = structlog.get_logger()


class NoopMailer:
    """Logs instead of sending. Used locally and whenever no provider is configured."""

    def send(self, to: str, subject: str, html_body: str, text_body: str) -> None:
        logger.info("mail_skipped", to=to, subject=subject)


class SmtpMailer:
    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        from_name: str = "",
        username: str | None = None,
        password: str | None = None,
        starttls: bool = True,
        timeout: float = 10,
    ) -> None:
        self.host = host
        self.port = port
        self.from_address = from_address
        self.from_name = from_name
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    def send(self, to: str, subject: str, html_body: str, text_body: str) -> None:
        message = EmailMessage()
        message["From"] = formataddr((self.from_name, self.from_address))
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text_body)
        message.add_alternative(html_body, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.starttls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)
        logger.info("mail_sent", to=to, subject=subject)


def build_mailer() -> Mailer:
    if settings.mailer_provider == "smtp":
        return SmtpMailer(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_address=settings.mail_from_address,
            from_name=settings.mail_from_name,
            username=settings.smtp_username,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
            timeout=settings.smtp_timeout_seconds,
        )
    if settings.mailer_provider != "noop":
        logger.warning("unknown_mailer_provider", provider=settings.mailer_provider)
    return NoopMailer()
