"""
Email Service for UniRate
=========================
Sends the 6-digit codes used by signup verification and password reset.

Delivery goes over SMTP (aiosmtplib). Failures raise EmailDeliveryError; the
caller decides whether to surface or mask them.
"""

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
from datetime import datetime, timezone

from app.core.config import settings
from app.core.exceptions import EmailDeliveryError
from app.core.logging_config import logger


class EmailService:
    """Async email service over SMTP"""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME

    @property
    def is_configured(self) -> bool:
        """Check if email service is properly configured"""
        return bool(self.smtp_user and self.smtp_password)

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> None:
        """
        Send an email asynchronously.

        Without SMTP credentials the message is only logged in development;
        anywhere else that is a delivery failure.
        """
        if not self.is_configured:
            if settings.is_dev_mode():
                logger.warning(
                    f"[Email] SMTP not configured, not sending '{subject}' to {to_email}:\n{text_content}"
                )
                return
            raise EmailDeliveryError("Email service is not configured")

        await self._send_via_smtp(to_email, subject, html_content, text_content)

    async def _send_via_smtp(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> None:
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email
        message["Subject"] = subject

        # Plain text first so clients that prefer it pick it up
        if text_content:
            message.attach(MIMEText(text_content, "plain"))
        message.attach(MIMEText(html_content, "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"[Email/SMTP] Failed to send email to {to_email}: {e}")
            raise EmailDeliveryError() from e

        logger.info(f"[Email/SMTP] Successfully sent email to {to_email}: {subject}")

    def _code_email(self, heading: str, intro: str, code: str, ttl_minutes: int):
        year = datetime.now(timezone.utc).year
        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }}
                .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background: #1e3a8a; color: white; padding: 24px; text-align: center; border-radius: 10px 10px 0 0; }}
                .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }}
                .code {{ font-size: 32px; letter-spacing: 8px; font-weight: 700; text-align: center; margin: 24px 0; }}
                .footer {{ text-align: center; margin-top: 30px; font-size: 12px; color: #6b7280; }}
            </style>
        </head>
        <body>
            <div class="container">
                <div class="header">
                    <h1>{heading}</h1>
                </div>
                <div class="content">
                    <p>{intro}</p>
                    <div class="code">{code}</div>
                    <p>This code expires in {ttl_minutes} minutes. If you didn't ask for it, you can ignore this email.</p>
                </div>
                <div class="footer">
                    <p>&copy; {year} {self.from_name}</p>
                </div>
            </div>
        </body>
        </html>
        """

        text_content = (
            f"{heading}\n\n{intro}\n\n    {code}\n\n"
            f"This code expires in {ttl_minutes} minutes. "
            "If you didn't ask for it, you can ignore this email.\n"
        )
        return html_content, text_content

    async def send_verification_code(self, to_email: str, code: str) -> None:
        """Signup verification code"""
        html_content, text_content = self._code_email(
            "Verify your email",
            f"Use this code to finish creating your {self.from_name} account:",
            code,
            settings.VERIFICATION_CODE_TTL_MINUTES,
        )
        await self.send_email(to_email, f"Your {self.from_name} verification code", html_content, text_content)

    async def send_password_reset_code(self, to_email: str, code: str) -> None:
        """Password reset code"""
        html_content, text_content = self._code_email(
            "Password Reset Request",
            "We received a request to reset your password. Enter this code to continue:",
            code,
            settings.PASSWORD_RESET_CODE_TTL_MINUTES,
        )
        await self.send_email(to_email, f"Reset your {self.from_name} password", html_content, text_content)


# Singleton instance
email_service = EmailService()
