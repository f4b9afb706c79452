"""
Outbound email through the Resend HTTP API.

Addresses on the demo domain are never delivered to; callers may supply an
override address to send to instead.
"""
import base64
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import httpx

from workforce.config import get_settings
from workforce.logging_config import get_logger

settings = get_settings()
logger = get_logger(__name__)

EMAIL_NOT_CONFIGURED = "Email service not configured"


@dataclass
class EmailResult:
    success: bool
    error: Optional[str] = None
    is_demo_account: bool = False


def is_demo_email(email: str) -> bool:
    """Check if an email belongs to a demo account."""
    return (email or "").lower().endswith(f"@{settings.demo_email_domain}")


def email_configured() -> bool:
    return bool(settings.resend_api_key)


def _wrap_html(heading: str, content: str) -> str:
    year = datetime.now().year
    return f"""<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background-color: #3b82f6; padding: 20px; text-align: center;">
      <h1 style="margin: 0; color: white;">{heading}</h1>
    </div>
    <div style="background-color: #f9fafb; padding: 30px; border: 1px solid #e5e7eb;">
      {content}
    </div>
    <div style="text-align: center; margin-top: 20px; color: #9ca3af; font-size: 12px;">
      <p>&copy; {year} MPDEE Ltd. All rights reserved.</p>
    </div>
  </body>
</html>"""


async def send_email(
    to: List[str],
    subject: str,
    html: str,
    attachments: Optional[List[dict]] = None,
) -> EmailResult:
    """
    Post a message to Resend.

    Never raises: failures are logged and returned as an unsuccessful result.
    """
    if not email_configured():
        logger.error("RESEND_API_KEY not configured")
        return EmailResult(success=False, error=EMAIL_NOT_CONFIGURED)

    payload = {
        "from": settings.resend_from_email,
        "to": to,
        "subject": subject,
        "html": html,
    }
    if attachments:
        payload["attachments"] = attachments

    try:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(
                settings.resend_api_url,
                headers={"Authorization": f"Bearer {settings.resend_api_key}"},
                json=payload,
            )
    except httpx.HTTPError as exc:
        logger.error(f"Error sending email '{subject}': {exc}")
        return EmailResult(success=False, error=f"Failed to send email: {exc}")

    if response.status_code >= 400:
        try:
            message = response.json().get("message", "Unknown error")
        except ValueError:
            message = response.text or "Unknown error"
        logger.error(f"Resend API error ({response.status_code}): {message}")
        return EmailResult(success=False, error=f"Failed to send email: {message}")

    logger.info(f"Email '{subject}' sent to {len(to)} recipient(s)")
    return EmailResult(success=True)


async def send_password_email(
    to: str,
    user_name: str,
    temporary_password: str,
    is_reset: bool = False,
    override_email: Optional[str] = None,
) -> EmailResult:
    """Send a welcome or password reset email carrying a temporary password."""
    is_demo = is_demo_email(to)
    if is_demo and not override_email:
        return EmailResult(
            success=False,
            error="Demo account requires real email address",
            is_demo_account=True,
        )
    recipient = override_email if is_demo else to

    if is_reset:
        subject = "Your Password Has Been Reset - MPDEE Digidocs"
        intro = (
            "Your password has been reset by an administrator. "
            "You can now log in using the temporary password below:"
        )
        heading = "MPDEE Digidocs"
    else:
        subject = "Welcome to MPDEE Digidocs - Your Login Details"
        intro = (
            "Welcome to MPDEE Digidocs! Your account has been created and you can "
            f"now log in as <strong>{to}</strong> using the temporary password below:"
        )
        heading = "Welcome to MPDEE Digidocs"

    content = f"""
      <p>Hello {user_name},</p>
      <p>{intro}</p>
      <p style="font-size: 24px; font-weight: bold; letter-spacing: 1px;">{temporary_password}</p>
      <p><strong>Important:</strong> You will be required to change this password when you first log in.</p>
    """
    result = await send_email([recipient], subject, _wrap_html(heading, content))
    result.is_demo_account = is_demo
    return result


async def send_rams_document_email(
    to: str,
    title: str,
    description: Optional[str],
    file_name: str,
    file_bytes: bytes,
) -> EmailResult:
    """Email a RAMS document to the requesting user as an attachment."""
    description_html = f"<p style=\"color: #666;\">{description}</p>" if description else ""
    content = f"""
      <p>Hello,</p>
      <p>You have requested to receive the following RAMS document via email:</p>
      <h3>{title}</h3>
      {description_html}
      <p>The document is attached to this email. Please review it carefully before signing in the app.</p>
    """
    attachment = {
        "filename": file_name,
        "content": base64.b64encode(file_bytes).decode("ascii"),
    }
    return await send_email(
        [to],
        f"RAMS Document: {title}",
        _wrap_html("MPDEE Digidocs", content),
        attachments=[attachment],
    )
