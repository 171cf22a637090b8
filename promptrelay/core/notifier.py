"""Versendet Kontaktformular-Einträge als E-Mail.

Zwei Transporte, per ``EMAIL_TRANSPORT`` gewählt und nie kombiniert:
direktes SMTP oder die Resend-API."""
import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

import httpx

from promptrelay.core.config import Settings
from promptrelay.core.errors import NotificationError
from promptrelay.core.models import ContactRequest

logger = logging.getLogger(__name__)

SEND_FAILURE_MESSAGE = "Failed to send message."
RESEND_API_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class ContactEmail:
    """Fertig zusammengesetzte Mail, unabhängig vom Transport."""

    sender: str
    recipient: str
    subject: str
    body: str
    reply_to: str


class Notifier:
    """Gemeinsame Schnittstelle beider Transporte."""

    def __init__(self, sender: str, recipient: str) -> None:
        self.sender = sender
        self.recipient = recipient

    def build_email(self, submission: ContactRequest) -> ContactEmail:
        body = (
            f"Name: {submission.name}\n"
            f"Email: {submission.email}\n"
            f"Message:\n{submission.message}\n"
        )
        return ContactEmail(
            sender=self.sender,
            recipient=self.recipient,
            subject=f"New contact form submission from {submission.name}",
            body=body,
            reply_to=submission.email,
        )

    async def notify_contact(self, submission: ContactRequest) -> None:
        """Sendet genau eine Mail für die Einsendung; Fehler -> ``NotificationError``."""
        email = self.build_email(submission)
        await self.deliver(email)
        logger.info("Contact message from %s delivered to %s", submission.email, self.recipient)

    async def deliver(self, email: ContactEmail) -> None:
        raise NotImplementedError


class SmtpNotifier(Notifier):
    """Versand über einen SMTP-Server (STARTTLS, bzw. implizites TLS auf Port 465)."""

    def __init__(self, host: str, port: int, user: str, password: str, sender: str, recipient: str) -> None:
        super().__init__(sender=sender, recipient=recipient)
        self.host = host
        self.port = port
        self.user = user
        self.password = password

    def _to_message(self, email: ContactEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = email.sender
        msg["To"] = email.recipient
        msg["Subject"] = email.subject
        msg["Reply-To"] = email.reply_to
        msg.set_content(email.body)
        return msg

    def _connect(self) -> smtplib.SMTP:
        if self.port == 465:
            return smtplib.SMTP_SSL(self.host, self.port)
        connection = smtplib.SMTP(self.host, self.port)
        try:
            connection.starttls()
        except (smtplib.SMTPException, OSError):
            connection.close()
            raise
        return connection

    def _send_sync(self, email: ContactEmail) -> None:
        # Header mit CR/LF lehnt EmailMessage mit ValueError ab.
        try:
            message = self._to_message(email)
        except ValueError as exc:
            logger.error(f"Invalid contact header value: {exc}")
            raise NotificationError(SEND_FAILURE_MESSAGE, details=str(exc)) from exc

        try:
            connection = self._connect()
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"SMTP transport setup failed ({self.host}:{self.port}): {exc}")
            raise NotificationError(SEND_FAILURE_MESSAGE, details=str(exc)) from exc

        try:
            connection.login(self.user, self.password)
            connection.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"SMTP send failed: {exc}")
            raise NotificationError(SEND_FAILURE_MESSAGE, details=str(exc)) from exc
        finally:
            try:
                connection.quit()
            except (smtplib.SMTPException, OSError):
                connection.close()

    async def deliver(self, email: ContactEmail) -> None:
        # smtplib blockiert -> im Default-Executor ausführen.
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._send_sync, email)


class ResendNotifier(Notifier):
    """Versand über die Resend-API (Bearer-Token)."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        recipient: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(sender=sender, recipient=recipient)
        self.api_key = api_key
        self._transport = transport

    async def deliver(self, email: ContactEmail) -> None:
        payload = {
            "from": email.sender,
            "to": [email.recipient],
            "subject": email.subject,
            "text": email.body,
            "reply_to": email.reply_to,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(RESEND_API_URL, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error(f"Resend request failed: {exc}")
            raise NotificationError(SEND_FAILURE_MESSAGE, details=str(exc)) from exc

        if response.is_error:
            try:
                details = response.json()
            except ValueError:
                details = response.text
            logger.error("Resend API answered %s: %s", response.status_code, details)
            raise NotificationError(SEND_FAILURE_MESSAGE, details=details)


def build_notifier(settings: Settings) -> Optional[Notifier]:
    """Wählt den Transport aus den Settings; fehlen Zugangsdaten, gibt es keinen."""
    if settings.email_transport == "resend":
        if not (settings.resend_api_key and settings.mail_from and settings.contact_recipient):
            logger.warning("Resend transport selected but RESEND_API_KEY/MAIL_FROM/CONTACT_RECIPIENT missing.")
            return None
        return ResendNotifier(
            api_key=settings.resend_api_key,
            sender=settings.mail_from,
            recipient=settings.contact_recipient,
        )

    if not (settings.smtp_host and settings.smtp_user and settings.smtp_password and settings.contact_recipient):
        logger.warning("SMTP transport selected but SMTP_HOST/SMTP_USER/SMTP_PASS/CONTACT_RECIPIENT missing.")
        return None
    return SmtpNotifier(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        sender=settings.mail_from or settings.smtp_user,
        recipient=settings.contact_recipient,
    )
