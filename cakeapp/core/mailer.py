"""
Outbound email over SMTP plus the account email templates.

Sending is blocking (smtplib), so :meth:`Mailer.send` pushes it to the
threadpool.  Every failure is raised as :class:`MailerError`; callers
decide whether that matters.
"""

from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from fastapi.concurrency import run_in_threadpool

from cakeapp.core.config import Settings
from cakeapp.core.exceptions import MailerError

logger = logging.getLogger(__name__)

BRAND = "CAKEApp By Liz"


class Mailer:
    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        from_email: str,
        from_name: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> Mailer:
        return cls(
            host=settings.SMTP_HOST.strip(),
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER.strip(),
            password=settings.SMTP_PASSWORD.strip(),
            from_email=settings.SMTP_FROM_EMAIL.strip(),
            from_name=settings.SMTP_FROM_NAME.strip(),
            use_tls=settings.SMTP_USE_TLS,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.host and self.port and self.from_email)

    def _build_message(self, to_email: str, subject: str, html_body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        display_name = self.from_name or self.from_email
        msg["From"] = f"{display_name} <{self.from_email}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def _send_sync(self, to_email: str, subject: str, html_body: str) -> None:
        msg = self._build_message(to_email, subject, html_body)
        if self.port == 465:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            if self.use_tls and self.port != 465:
                server.starttls()
            if self.user and self.password:
                server.login(self.user, self.password)
            server.sendmail(self.from_email, [to_email], msg.as_string())
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:
                server.close()

    async def send(self, to_email: str, subject: str, html_body: str) -> None:
        if not self.configured:
            raise MailerError("SMTP is not configured")
        try:
            await run_in_threadpool(self._send_sync, to_email, subject, html_body)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailerError(f"SMTP delivery to {to_email} failed: {exc}") from exc
        logger.info("Email sent to %s: %s", to_email, subject)


# ── Templates ───────────────────────────────────────────────────────
def _layout(title: str, body: str) -> str:
    return (
        "<div style=\"font-family: Arial, sans-serif; max-width: 560px; margin: auto;\">"
        f"<h2 style=\"color: #d63384;\">{title}</h2>"
        f"{body}"
        f"<p style=\"color: #888; font-size: 12px;\">{BRAND}</p>"
        "</div>"
    )


def verification_email(name: str, code: int) -> str:
    return _layout(
        "Verify your email",
        f"<p>Hi {escape(name)},</p>"
        "<p>Use the code below to verify your account:</p>"
        f"<p style=\"font-size: 28px; letter-spacing: 6px;\"><strong>{code}</strong></p>"
        "<p>If you did not create an account you can ignore this email.</p>",
    )


def verified_email(name: str) -> str:
    return _layout(
        "Your email has been verified",
        f"<p>Hi {escape(name)},</p>"
        "<p>Your account is now active. You can log in and start ordering cakes.</p>",
    )
