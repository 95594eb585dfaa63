"""
Report email delivery over SMTP (aiosmtplib).

One plain-text message per submitted report, addressed to the administrator.
Delivery is attempted once; any transport, TLS, authentication or network
failure is raised as MailError for the caller to report.
"""

import asyncio
import logging
from datetime import datetime
from email.message import EmailMessage
from email.utils import formataddr, formatdate
from typing import Callable, Optional

import aiosmtplib

from guardreport.config import Settings
from guardreport.errors import MailError
from guardreport.storage.models import Report

logger = logging.getLogger(__name__)

UNKNOWN_GUARD = "okänd väktare"
NOT_GIVEN = "Ej angivet"
UNKNOWN_COORDINATE = "Okänd"

REPORT_BODY_TEMPLATE = """\
Rapport från: {guards}
Butik: {store}
Område: {area}
Typ: {type}
Handfängsel använt: {handcuffs_used}
Polis tillkallad: {police_called}
Patrullnummer: {patrol_number}
Position: {lat}, {lng}
Tidpunkt: {sent_at}

Beskrivning:
{description}
"""

_TRANSPORT_ERRORS = (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError)


def _yes_no(flag: Optional[bool]) -> str:
    return "Ja" if flag else "Nej"


def _single_line(value: str) -> str:
    return " ".join(value.split())


def _coordinate(value: Optional[float]) -> str:
    return UNKNOWN_COORDINATE if value is None else str(value)


class NotificationGateway:
    """Sends report emails to a single administrator address."""

    def __init__(self, settings: Settings, clock: Callable[[], datetime] = datetime.now):
        self.hostname = settings.email_host
        self.port = settings.email_port
        self.username = settings.email_user
        self.password = settings.email_password
        self.use_tls = settings.email_use_tls
        self.timeout = settings.email_timeout
        self.sender_name = settings.email_sender_name
        self.recipient = settings.admin_email
        self._clock = clock

    def compose_report_email(self, report: Report, sent_at: datetime) -> EmailMessage:
        """Build the administrator email for report, stamped with sent_at."""
        sender = _single_line(report.guards[0]) if report.guards else UNKNOWN_GUARD
        position = report.position

        message = EmailMessage()
        message["From"] = formataddr((self.sender_name, self.username))
        message["To"] = self.recipient
        message["Subject"] = f"Ny rapport från {sender}"
        message["Date"] = formatdate(localtime=True)
        message.set_content(
            REPORT_BODY_TEMPLATE.format(
                guards=", ".join(report.guards),
                store=report.store,
                area=report.area,
                type=report.type,
                handcuffs_used=_yes_no(report.handcuffs_used),
                police_called=_yes_no(report.police_called),
                patrol_number=report.patrol_number or NOT_GIVEN,
                lat=_coordinate(position.lat if position else None),
                lng=_coordinate(position.lng if position else None),
                sent_at=sent_at.strftime("%Y-%m-%d %H:%M:%S"),
                description=report.description,
            )
        )
        return message

    async def send_report_email(self, report: Report) -> None:
        """
        Send the report email and wait for the server to accept it.

        Raises:
            MailError: the message could not be delivered to the SMTP server
        """
        try:
            message = self.compose_report_email(report, sent_at=self._clock())
        except ValueError as e:
            logger.error(f"Could not compose report email for report {report.id}: {e}")
            raise MailError(f"Could not compose report email: {e}") from e

        try:
            await aiosmtplib.send(
                message,
                hostname=self.hostname,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                use_tls=self.use_tls,
                timeout=self.timeout,
            )
        except _TRANSPORT_ERRORS as e:
            logger.error(f"Failed to send report email to {self.recipient}: {e}", exc_info=True)
            raise MailError(f"Could not send report email: {e}") from e

        logger.info(f"Report email sent to {self.recipient} ({message['Subject']})")

    async def verify(self) -> bool:
        """
        Connect and authenticate once, without sending anything.

        Returns True on success. Failures are logged, never raised.
        """
        smtp = aiosmtplib.SMTP(
            hostname=self.hostname,
            port=self.port,
            use_tls=self.use_tls,
            timeout=self.timeout,
        )

        try:
            await smtp.connect()
            if self.username:
                await smtp.login(self.username, self.password)
            await smtp.quit()
        except aiosmtplib.SMTPAuthenticationError as e:
            logger.error(f"Mail authentication failed for {self.username}: {e}")
            return False
        except _TRANSPORT_ERRORS as e:
            logger.error(f"Mail connection to {self.hostname}:{self.port} failed: {e}")
            return False
        finally:
            if smtp.is_connected:
                smtp.close()

        logger.info(f"Mail connection verified ({self.hostname}:{self.port})")
        return True
