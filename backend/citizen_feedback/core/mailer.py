# backend/citizen_feedback/core/mailer.py
"""
Outgoing mail for the admin password flow.

Templates are Jinja2 strings sharing one branded layout; each render_*
helper returns (subject, html, text). Delivery is plain SMTP with STARTTLS,
run in a worker thread so the event loop is not blocked.
"""
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Tuple

from jinja2 import Environment, select_autoescape
from starlette.concurrency import run_in_threadpool

from citizen_feedback.core.config import settings

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    pass


_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))

BASE_TEMPLATE = _env.from_string("""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ brand }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 0; padding: 0; background-color: #f4f4f4; }
        .container { max-width: 600px; margin: 20px auto; background-color: #ffffff; border-radius: 8px; }
        .header { background: #2c3e50; color: white; padding: 30px; text-align: center; border-radius: 8px 8px 0 0; }
        .content { padding: 30px; }
        .otp-code { font-size: 32px; font-weight: bold; color: #2c3e50; letter-spacing: 5px; padding: 15px 25px;
                    border: 2px dashed #3498db; border-radius: 4px; display: inline-block; }
        .box { background-color: #f8f9fa; padding: 20px; border-radius: 6px; margin: 20px 0; }
        .warning { background-color: #fff3cd; border: 1px solid #ffeaa7; padding: 15px; border-radius: 6px; color: #856404; }
        .footer { background-color: #f8f9fa; padding: 20px; text-align: center; font-size: 14px; color: #6c757d; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{{ brand }}</h1>
            <p>Official Communication</p>
        </div>
        <div class="content">
            {% block content %}{% endblock %}
        </div>
        <div class="footer">
            <p>This is an automated message from {{ brand }} Department.<br>Please do not reply to this email.</p>
        </div>
    </div>
</body>
</html>
""")

_TEMPLATES = {
    "otp": _env.from_string("""{% extends base %}{% block content %}
<div class="box">
    <h3>Password Reset Request</h3>
    <p>We received a request to reset the password of your {{ brand }} admin account.
    If you did not make this request, please ignore this email.</p>
</div>
<p style="text-align: center">Your one-time password is</p>
<p style="text-align: center"><span class="otp-code">{{ otp }}</span></p>
<div class="warning">
    <ul>
        <li>This code is valid for {{ minutes }} minutes.</li>
        <li>Never share this code with anyone.</li>
    </ul>
</div>
{% endblock %}"""),
    "welcome": _env.from_string("""{% extends base %}{% block content %}
<div class="box">
    <h3>Welcome</h3>
    <p>An admin account has been created for <strong>{{ email }}</strong> on the {{ brand }}
    citizen feedback dashboard.</p>
</div>
{% endblock %}"""),
    "password_changed": _env.from_string("""{% extends base %}{% block content %}
<div class="box">
    <h3>Password Changed</h3>
    <p>The password of your {{ brand }} admin account was changed successfully.</p>
</div>
<div class="warning">If you did not make this change, contact the system administrator immediately.</div>
{% endblock %}"""),
}


def _render(name: str, **context) -> str:
    return _TEMPLATES[name].render(base=BASE_TEMPLATE, brand=settings.MAIL_FROM_NAME, **context)


def render_otp_email(otp: str, minutes: Optional[int] = None) -> Tuple[str, str, str]:
    minutes = minutes or settings.OTP_EXPIRE_MINUTES
    subject = f"{settings.MAIL_FROM_NAME} - Password Reset OTP"
    text = (
        f"Your password reset OTP is {otp}. It is valid for {minutes} minutes. "
        "If you did not request a password reset, please ignore this email."
    )
    return subject, _render("otp", otp=otp, minutes=minutes), text


def render_welcome_email(email: str) -> Tuple[str, str, str]:
    subject = f"Welcome to {settings.MAIL_FROM_NAME} Admin"
    text = f"An admin account has been created for {email} on the citizen feedback dashboard."
    return subject, _render("welcome", email=email), text


def render_password_changed_email() -> Tuple[str, str, str]:
    subject = f"{settings.MAIL_FROM_NAME} - Password Changed"
    text = "Your admin password was changed successfully. If this was not you, contact the administrator."
    return subject, _render("password_changed"), text


@dataclass(frozen=True)
class OutgoingMail:
    to: str
    subject: str
    html: str
    text: str


def _build_message(mail: OutgoingMail) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["Subject"] = mail.subject
    message["From"] = f"{settings.MAIL_FROM_NAME} <{settings.MAIL_FROM}>"
    message["To"] = mail.to
    message.attach(MIMEText(mail.text, "plain", "utf-8"))
    message.attach(MIMEText(mail.html, "html", "utf-8"))
    return message


def _deliver(mail: OutgoingMail) -> None:
    message = _build_message(mail)
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
        server.starttls()
        if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(message)


async def send_mail(to: str, content: Tuple[str, str, str]) -> None:
    """
    Send a rendered (subject, html, text) triple. Raises MailDeliveryError.
    """
    subject, html, text = content
    mail = OutgoingMail(to=to, subject=subject, html=html, text=text)
    try:
        await run_in_threadpool(_deliver, mail)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send mail to %s: %s", to, e)
        raise MailDeliveryError(str(e)) from e
    logger.info("Mail '%s' sent to %s", subject, to)
