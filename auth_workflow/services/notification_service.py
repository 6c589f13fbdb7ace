"""
OTP mail delivery.

Two dispatchers satisfy ``INotificationDispatcher``: SendGrid for real
delivery and a console dispatcher that only logs, for local development.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from html import escape
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
import structlog

from ..core.config import Settings, settings as default_settings
from ..interfaces.notification_interface import INotificationDispatcher

logger = structlog.get_logger()

OTP_SUBJECT = "OTP Request"

OTP_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; color: #333;">
    <p>Hello {user_name},</p>
    <p>Your one-time password is:</p>
    <p style="font-size: 28px; font-weight: bold; letter-spacing: 6px;">{otp}</p>
    <p>This code expires in {expire_minutes} minutes. If you did not request it, ignore this email.</p>
    <p style="color: #6b7280; font-size: 12px;">Sent {date}</p>
  </body>
</html>
"""


@dataclass(frozen=True)
class OTPEmail:
    to: str
    subject: str
    text: str
    html: str


def build_otp_email(email: str, user_name: str, otp: str, expire_minutes: int) -> OTPEmail:
    date = datetime.now().strftime("%d/%m/%Y, %H:%M:%S")
    return OTPEmail(
        to=email,
        subject=OTP_SUBJECT,
        text=f"Hello {user_name},\n\nYour OTP is: {otp}",
        html=OTP_HTML_TEMPLATE.format(
            user_name=escape(user_name),
            otp=otp,
            expire_minutes=expire_minutes,
            date=date
        )
    )


class EmailDeliveryError(Exception):
    """Raised when the mail provider refuses a message."""


class SendGridOTPDispatcher(INotificationDispatcher):
    """Deliver OTP emails through the SendGrid API."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        expire_minutes: int,
        client: SendGridAPIClient = None
    ):
        self.from_email = from_email
        self.expire_minutes = expire_minutes
        self.client = client or SendGridAPIClient(api_key)

    async def dispatch(self, email: str, human_name: str, code: str) -> str:
        message = build_otp_email(email, human_name, code, self.expire_minutes)
        mail = Mail(
            from_email=self.from_email,
            to_emails=message.to,
            subject=message.subject,
            plain_text_content=message.text,
            html_content=message.html
        )

        try:
            # The SendGrid client is blocking
            response = await asyncio.to_thread(self.client.send, mail)
        except Exception as e:
            logger.error("Error sending email", error=str(e))
            raise EmailDeliveryError(f"Failed to send email: {e}") from e

        if response.status_code >= 300:
            logger.error("Email rejected by provider", status_code=response.status_code)
            raise EmailDeliveryError(f"Email provider returned status {response.status_code}")

        logger.info("Email sent", status_code=response.status_code)
        return message.to


class ConsoleOTPDispatcher(INotificationDispatcher):
    """Development dispatcher: writes the code to the log instead of mailing it."""

    def __init__(self, expire_minutes: int):
        self.expire_minutes = expire_minutes

    async def dispatch(self, email: str, human_name: str, code: str) -> str:
        message = build_otp_email(email, human_name, code, self.expire_minutes)
        logger.warning(
            "Console email backend in use, OTP not delivered",
            to=message.to,
            subject=message.subject,
            otp=code
        )
        return message.to


def create_notification_dispatcher(settings: Settings = default_settings) -> INotificationDispatcher:
    if settings.EMAIL_BACKEND == "sendgrid":
        return SendGridOTPDispatcher(
            api_key=settings.SENDGRID_API_KEY,
            from_email=settings.EMAILS_FROM_EMAIL,
            expire_minutes=settings.OTP_EXPIRE_MINUTES
        )
    return ConsoleOTPDispatcher(expire_minutes=settings.OTP_EXPIRE_MINUTES)
