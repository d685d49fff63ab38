"""
SMTP email delivery for analysis reports.

Credentials come from Settings; a missing user/password is reported as a
configuration error, anything the relay or socket raises as a delivery error.
"""

import smtplib
import socket
import logging
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Optional

from config import settings
from core.errors import EmailConfigurationError, EmailDeliveryError, validate_email

logger = logging.getLogger(__name__)

# EMAIL_SERVICE shorthand -> SMTP host
SMTP_SERVICES = {
    "gmail": "smtp.gmail.com",
    "outlook": "smtp-mail.outlook.com",
    "hotmail": "smtp-mail.outlook.com",
    "yahoo": "smtp.mail.yahoo.com",
    "sendgrid": "smtp.sendgrid.net",
    "mailgun": "smtp.mailgun.org",
}


def _mask(user: Optional[str]) -> str:
    if not user:
        return "Not configured"
    return user[:5] + "..."


def smtp_host() -> str:
    return settings.EMAIL_HOST or SMTP_SERVICES.get(settings.EMAIL_SERVICE.lower(), settings.EMAIL_SERVICE)


def describe_email_config() -> dict:
    """Email configuration safe to return to callers (user masked, no password)."""
    return {
        "service": settings.EMAIL_SERVICE,
        "host": smtp_host(),
        "port": settings.EMAIL_PORT,
        "user": _mask(settings.EMAIL_USER),
        "pass_configured": bool(settings.EMAIL_PASS),
    }


def send_email(to: str, subject: str, html: str) -> dict:
    """
    Send an HTML email over SMTP with STARTTLS.

    Args:
        to: Recipient address (validated)
        subject: Subject line
        html: HTML body

    Returns:
        Dict with the recipient and the Message-ID header

    Raises:
        ValidationError: If the address is malformed
        EmailConfigurationError: If EMAIL_USER or EMAIL_PASS is missing
        EmailDeliveryError: If the SMTP exchange fails
    """
    validate_email(to)

    if not settings.EMAIL_USER or not settings.EMAIL_PASS:
        logger.error("❌ Email credentials are missing in environment variables")
        raise EmailConfigurationError("Email configuration is incomplete")

    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = settings.EMAIL_USER
    message["To"] = to
    message["Message-ID"] = make_msgid()
    message.attach(MIMEText(html, "html", "utf-8"))

    host = smtp_host()
    logger.info(f"📧 Sending email to {to} via {host}:{settings.EMAIL_PORT} as {_mask(settings.EMAIL_USER)}")

    try:
        with smtplib.SMTP(host, settings.EMAIL_PORT, timeout=settings.EMAIL_TIMEOUT) as server:
            server.ehlo()
            server.starttls()
            server.ehlo()
            server.login(settings.EMAIL_USER, settings.EMAIL_PASS)
            server.sendmail(settings.EMAIL_USER, [to], message.as_string())
    except (smtplib.SMTPException, socket.error) as e:
        logger.error(f"❌ Email delivery to {to} failed: {str(e)}")
        raise EmailDeliveryError(str(e))

    logger.info(f"✅ Email sent to {to}")
    return {"to": to, "message_id": message["Message-ID"]}


def build_test_email_html() -> str:
    return f"""
<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background-color: #4B0082; color: white; padding: 10px; text-align: center; }}
    .content {{ padding: 20px; background-color: #f8f9fa; }}
    .footer {{ text-align: center; margin-top: 20px; font-size: 12px; color: #666; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>Site Analyzer Test Email</h1></div>
    <div class="content">
      <p>This is a test email from the Site Analyzer service.</p>
      <p>If you're receiving this, email delivery is working correctly.</p>
      <p>Server time: {datetime.utcnow().isoformat()}</p>
      <p>Environment: {settings.ENVIRONMENT}</p>
    </div>
    <div class="footer"><p>Site Analyzer - Website Analysis Tool</p></div>
  </div>
</body>
</html>
"""
