from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SMTPSettings:
    host: str
    port: int
    username: str
    password: str
    timeout: int = 5

    @classmethod
    def from_dict(cls, smtp_config: dict) -> "SMTPSettings":
        return cls(
            host=str(smtp_config.get("host", "smtp.gmail.com")),
            port=int(smtp_config.get("port", 587)),
            username=str(smtp_config.get("username", "")),
            password=str(smtp_config.get("password", "")),
            timeout=int(smtp_config.get("timeout", 5)),
        )


_LAYOUT = """<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
    <h1>{title}</h1>
  </div>
  <div style="background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px;">
    {body}
    <p>Best regards,<br>The Bunk Buzz Team</p>
  </div>
</body>
</html>
"""


class EmailService:
    """Sends account emails over SMTP.

    Sending never raises: a failed send is logged and reported as ``False`` so
    signup and verification keep working when the mail server is down.
    """

    def __init__(self, smtp: SMTPSettings, *, from_name: str, frontend_url: str):
        self._smtp = smtp
        self._from_name = from_name
        self._frontend_url = frontend_url.rstrip("/")

    def verification_url(self, token: str) -> str:
        return f"{self._frontend_url}/verify-email?token={token}"

    def _send(self, *, to: str, subject: str, html: str) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self._from_name, self._smtp.username))
        msg["To"] = to
        msg.attach(MIMEText(html, "html", "utf-8"))

        if not self._smtp.username or not self._smtp.password:
            logger.warning("SMTP credentials are missing, skipped '%s' email to %s", subject, to)
            return False

        try:
            with smtplib.SMTP(self._smtp.host, self._smtp.port, timeout=self._smtp.timeout) as server:
                server.starttls()
                server.login(self._smtp.username, self._smtp.password)
                server.sendmail(self._smtp.username, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send '%s' email to %s: %s", subject, to, exc)
            return False

        logger.info("Sent '%s' email to %s", subject, to)
        return True

    def send_verification_email(self, email: str, name: str, token: str) -> bool:
        url = self.verification_url(token)
        body = f"""
    <h2>Hi {escape(name)},</h2>
    <p>Thank you for signing up for Bunk Buzz! Please verify your email address to get started:</p>
    <p style="text-align: center;"><a href="{url}">Verify Email</a></p>
    <p>Or copy and paste this link into your browser:</p>
    <p style="word-break: break-all; color: #667eea;">{url}</p>
    <p><strong>This link will expire in 24 hours.</strong></p>
    <p>If you didn't create an account with Bunk Buzz, please ignore this email.</p>"""
        return self._send(
            to=email,
            subject="Verify Your Email - Bunk Buzz",
            html=_LAYOUT.format(title="Welcome to Bunk Buzz!", body=body),
        )

    def send_welcome_email(self, email: str, name: str) -> bool:
        body = f"""
    <h2>Welcome aboard, {escape(name)}!</h2>
    <p>Your email has been verified successfully. You can now:</p>
    <ul>
      <li>Track attendance for all your subjects</li>
      <li>Manage your timetable</li>
      <li>Use the Bunk Predictor to make smart decisions</li>
    </ul>
    <p>Get started by adding your subjects and marking your attendance!</p>"""
        return self._send(
            to=email,
            subject="Welcome to Bunk Buzz!",
            html=_LAYOUT.format(title="You're All Set!", body=body),
        )
