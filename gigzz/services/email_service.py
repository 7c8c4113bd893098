"""
Transactional email through the Resend HTTP API.
"""
import html
import logging
from typing import Optional

import httpx

from gigzz.core import config
from gigzz.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

_BUTTON_STYLE = (
    "display:inline-block;padding:12px 24px;background:#000;color:#fff;"
    "text-decoration:none;border-radius:6px;"
)


def send_email(to: str, subject: str, html: str, timeout: float = 15.0) -> Optional[str]:
    """
    Send an HTML email.

    Returns:
        Provider message id

    Raises:
        EmailDeliveryError: provider not configured or request failed
    """
    if not config.RESEND_API_KEY:
        logger.error("RESEND_API_KEY not configured - cannot send email")
        raise EmailDeliveryError("Email provider is not configured")

    payload = {
        "from": config.EMAIL_FROM,
        "to": [to],
        "subject": subject,
        "html": html,
    }
    headers = {"Authorization": f"Bearer {config.RESEND_API_KEY}"}

    try:
        response = httpx.post(config.RESEND_API_URL, json=payload, headers=headers, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(f"Email provider rejected message: status={e.response.status_code}, subject={subject!r}")
        raise EmailDeliveryError("Email provider rejected the message", {"status": e.response.status_code}) from e
    except httpx.HTTPError as e:
        logger.error(f"Email request failed: {type(e).__name__}: {e}")
        raise EmailDeliveryError("Could not reach email provider") from e

    message_id = response.json().get("id")
    logger.info(f"Email sent: subject={subject!r}, id={message_id}")
    return message_id


def verification_url(token: str) -> str:
    return f"{config.FRONTEND_URL}/auth/verify-email?token={token}"


def password_reset_url(token: str) -> str:
    return f"{config.FRONTEND_URL}/auth/update-password?token={token}"


def build_verification_email(first_name: str, token: str) -> str:
    url = verification_url(token)
    first_name = html.escape(first_name or "")
    return f"""
<div style="font-family: Arial, sans-serif; padding: 20px;">
  <h2>Welcome to Gigzz, {first_name}!</h2>
  <p>Thank you for signing up. Please verify your email address by clicking the button below:</p>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{url}" style="{_BUTTON_STYLE}">Verify Email Address</a>
  </div>
  <p>Or copy and paste this link in your browser:</p>
  <p>{url}</p>
  <p>If you didn't create an account, please ignore this email.</p>
</div>
"""


def build_password_reset_email(token: str) -> str:
    url = password_reset_url(token)
    return f"""
<div style="font-family: Arial, sans-serif; padding: 20px;">
  <h2>Reset your Gigzz password</h2>
  <p>Click below to reset your password:</p>
  <a href="{url}" style="{_BUTTON_STYLE}">Reset Password</a>
  <p>If you didn't request this, ignore this email.</p>
</div>
"""


def send_verification_email(to: str, first_name: str, token: str) -> Optional[str]:
    return send_email(to, "Verify your Gigzz account", build_verification_email(first_name, token))


def send_password_reset_email(to: str, token: str) -> Optional[str]:
    return send_email(to, "Reset your Gigzz password", build_password_reset_email(token))
