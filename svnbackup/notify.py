"""
Error notification by email.

Sent by the command line front end when a backup run fails.
"""

import html
import smtplib
import traceback
from email.message import EmailMessage


SUBJECT = "Exception Backing Up SVN Repositories"

_SMTP_TIMEOUT = 20.0


class NotificationError(Exception):
    """Raised when the error email cannot be built or sent."""
    pass


def _format_exception(exc: BaseException) -> str:
    return ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def build_error_message(exc: BaseException, settings) -> EmailMessage:
    """
    Build the error email for a failed run.

    Args:
        exc: Exception that ended the run
        settings: Config class with EMAIL_FROM and EMAIL_TO

    Returns:
        EmailMessage with a plain text body and an HTML alternative

    Raises:
        NotificationError: If sender or recipients are not configured
    """
    if not settings.EMAIL_FROM:
        raise NotificationError("Sender email is not configured")
    if not settings.EMAIL_TO:
        raise NotificationError("No email recipients configured")

    details = _format_exception(exc)

    message = EmailMessage()
    message["From"] = settings.EMAIL_FROM
    message["To"] = ", ".join(settings.EMAIL_TO)
    message["Subject"] = SUBJECT
    message["Auto-Submitted"] = "auto-generated"

    message.set_content(f"SVNBackup Error - ERROR\r\n\r\n{exc}\r\n{details}")
    message.add_alternative(
        f"<H1>SVNBackup Error - ERROR</H1><H2>{html.escape(str(exc))}</H2>"
        f"<pre>{html.escape(details)}</pre>",
        subtype="html"
    )
    return message


def send_error_email(exc: BaseException, settings, smtp_factory=smtplib.SMTP):
    """
    Send the error email through the configured SMTP server.

    Args:
        exc: Exception that ended the run
        settings: Config class with SMTP and email settings
        smtp_factory: SMTP client class

    Raises:
        NotificationError: If the message cannot be built or delivered
    """
    if not settings.SMTP_SERVER:
        raise NotificationError("SMTP server is not configured")

    message = build_error_message(exc, settings)

    try:
        with smtp_factory(host=settings.SMTP_SERVER, port=settings.SMTP_PORT,
                          timeout=_SMTP_TIMEOUT) as client:
            client.send_message(message, to_addrs=settings.EMAIL_TO)
    except (smtplib.SMTPException, OSError) as e:
        raise NotificationError(f"Failed to send error email: {e}") from e
