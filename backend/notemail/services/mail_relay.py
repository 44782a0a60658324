"""
Notemail Backend — Mail Relay
=============================

What:  Hands a note's content to an SMTP server as an email.
How:   Composes a multipart/alternative message (plain text + HTML) and sends
       it through an aiosmtplib client. The client is created lazily on the
       first send, connected and authenticated once, and reused for the rest
       of the process lifetime.
Who:   Built once at startup (`MailRelay.from_settings`) and stored on
       `app.state`; the email routes receive it through `get_mail_relay`.

Transport handle lifecycle:
    None ──first send──▶ created + connected + logged in ──▶ reused
                                   │
                    server dropped the connection
                                   ▼
                    same handle reconnected + logged in

    An asyncio.Lock serializes creation and use of the handle, so concurrent
    first sends settle on a single client.

No retries: a failed send raises TransportError and the caller decides.
"""

import asyncio
import html
import logging
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Any, Awaitable, Callable, Optional

import aiosmtplib

from notemail.config import Settings
from notemail.exceptions import NotConfiguredError, TransportError

logger = logging.getLogger(__name__)

TransportFactory = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class ComposedEmail:
    """Both renderings of an outgoing note, before MIME encoding."""

    sender: str
    to: str
    subject: str
    text: str
    html: str


@dataclass(frozen=True)
class DeliveryConfirmation:
    message_id: str
    recipient: str


def fold_header(value: str) -> str:
    """Joins every line of `value` with single spaces (str.splitlines boundaries)."""
    return " ".join(value.splitlines())


def render_html(subject: str, body: str, signature: str) -> str:
    """
    HTML rendering of a note: subject as a heading, every newline in the body
    as a <br> line break. Subject and body are escaped first.
    """
    escaped_body = html.escape(body).replace("\r\n", "\n").replace("\n", "<br>")
    return (
        '<div style="font-family: Arial, sans-serif; padding: 20px;">'
        f'<h2 style="color: #2c3e50;">{html.escape(subject)}</h2>'
        '<div style="white-space: pre-wrap; line-height: 1.6; color: #34495e;">'
        f"{escaped_body}"
        "</div>"
        '<hr style="margin-top: 30px; border: none; border-top: 1px solid #ecf0f1;">'
        f'<p style="color: #95a5a6; font-size: 12px;">{html.escape(signature)}</p>'
        "</div>"
    )


class MailRelay:
    """
    Wrapper around one lazily created SMTP client.

    Args:
        sender: From address; also the SMTP login name.
        password: App password for the SMTP account.
        host / port / use_tls: SMTP endpoint (implicit TLS by default).
        signature: Footer line of the HTML rendering.
        transport_factory: Coroutine function returning an unconnected
            client with `connect()`, `login()`, `send_message()`, `quit()`
            and `is_connected`. Defaults to an aiosmtplib.SMTP factory;
            tests pass a fake.
    """

    def __init__(
        self,
        sender: Optional[str],
        password: Optional[str],
        host: str = "smtp.gmail.com",
        port: int = 465,
        use_tls: bool = True,
        signature: str = "Sent from Notes App",
        transport_factory: Optional[TransportFactory] = None,
    ):
        self.sender = sender or None
        self._password = password or None
        self.host = host
        self.port = port
        self.use_tls = use_tls
        self.signature = signature
        self._transport_factory = transport_factory or self._create_smtp_client
        self._transport: Optional[Any] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "MailRelay":
        return cls(
            sender=settings.gmail_user,
            password=settings.gmail_app_password,
            host=settings.smtp_host,
            port=settings.smtp_port,
            use_tls=settings.smtp_use_tls,
            signature=settings.mail_signature,
            **kwargs,
        )

    # ── Configuration probes (no I/O) ─────────────────────────────────────

    def is_configured(self) -> bool:
        return bool(self.sender and self._password)

    def get_sender_address(self) -> Optional[str]:
        return self.sender

    # ── Composition ───────────────────────────────────────────────────────

    def compose(self, to: str, subject: str, body: str) -> ComposedEmail:
        # Header values cannot span lines; a multi-line title becomes one line
        subject = fold_header(subject)
        return ComposedEmail(
            sender=self.sender or "",
            to=to,
            subject=subject,
            text=body,
            html=render_html(subject, body, self.signature),
        )

    def build_message(self, email: ComposedEmail) -> EmailMessage:
        """MIME message with a generated Message-ID; text part first."""
        message = EmailMessage()
        message["From"] = email.sender
        message["To"] = email.to
        message["Subject"] = email.subject
        domain = email.sender.rpartition("@")[2] or None
        message["Message-ID"] = make_msgid(domain=domain)
        message.set_content(email.text)
        message.add_alternative(email.html, subtype="html")
        return message

    # ── Delivery ──────────────────────────────────────────────────────────

    async def send(self, to: str, subject: str, body: str) -> DeliveryConfirmation:
        """
        Send `body` to `to`.

        Raises:
            NotConfiguredError: Sender or password missing; nothing is sent.
            TransportError: The SMTP server rejected the message or could not
                be reached. The original exception is chained.
        """
        if not self.is_configured():
            raise NotConfiguredError()

        message = self.build_message(self.compose(to, subject, body))
        message_id = str(message["Message-ID"])

        try:
            async with self._lock:
                transport = await self._ensure_transport()
                await transport.send_message(message)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Error sending email to %s: %s", to, str(e))
            raise TransportError(
                message=f"Failed to send email: {e}",
                cause=e,
                context={"recipient": to},
            ) from e

        logger.info("Email sent to %s (message_id=%s)", to, message_id)
        return DeliveryConfirmation(message_id=message_id, recipient=to)

    async def close(self) -> None:
        """Quits the SMTP session if one is open. Safe to call repeatedly."""
        async with self._lock:
            transport = self._transport
            if transport is None or not transport.is_connected:
                return
            try:
                await transport.quit()
            except (aiosmtplib.SMTPException, OSError) as e:
                logger.warning("Error closing SMTP connection: %s", str(e))

    async def _ensure_transport(self) -> Any:
        # Caller holds self._lock
        if self._transport is None:
            self._transport = await self._transport_factory()
            logger.info("Mail transport created for %s:%d", self.host, self.port)

        if not self._transport.is_connected:
            await self._transport.connect()
            try:
                await self._transport.login(self.sender, self._password)
            except aiosmtplib.SMTPException:
                # Unauthenticated sessions are not reused
                self._transport.close()
                raise
            logger.info("Mail transport authenticated as %s", self.sender)

        return self._transport

    async def _create_smtp_client(self) -> aiosmtplib.SMTP:
        return aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            use_tls=self.use_tls,
        )
