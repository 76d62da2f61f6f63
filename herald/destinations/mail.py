"""SMTP mail destination."""

from __future__ import annotations

import asyncio
import smtplib
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import structlog

from herald.core.config import MailConfig
from herald.destinations.base import Destination
from herald.destinations.exceptions import DestinationSendError
from herald.destinations.formatters import (
    format_detail_html,
    format_mail_body,
    format_mail_subject,
)
from herald.message import FormattedDetail, Message

logger = structlog.get_logger(__name__)


class MailDestination(Destination):
    """Sends a plain-text mail per message, plus an HTML alternative when
    the detail is formatted.

    smtplib is blocking, so each send runs in a worker thread.
    """

    def __init__(self, config: MailConfig) -> None:
        self._config = config

    def build_mail(self, msg: Message) -> MIMEBase:
        text = MIMEText(format_mail_body(msg), "plain", "utf-8")
        mail: MIMEBase
        if isinstance(msg.detail, FormattedDetail):
            mail = MIMEMultipart("alternative")
            mail.attach(text)
            mail.attach(MIMEText(format_detail_html(msg.detail), "html", "utf-8"))
        else:
            mail = text
        mail["Subject"] = format_mail_subject(msg)
        mail["From"] = self._config.from_address
        mail["To"] = ", ".join(self._config.to_addresses)
        return mail

    def _deliver(self, mail: MIMEBase) -> None:
        config = self._config
        if config.use_ssl:
            smtp: smtplib.SMTP = smtplib.SMTP_SSL(
                config.smtp_host, config.smtp_port, timeout=config.timeout_secs
            )
        else:
            smtp = smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=config.timeout_secs)
        try:
            if config.use_tls and not config.use_ssl:
                smtp.starttls()
            if config.smtp_user and config.smtp_password:
                smtp.login(config.smtp_user, config.smtp_password.get_secret_value())
            smtp.sendmail(config.from_address, config.to_addresses, mail.as_string())
        finally:
            smtp.quit()

    async def send(self, msg: Message) -> None:
        mail = self.build_mail(msg)
        try:
            await asyncio.to_thread(self._deliver, mail)
        except (smtplib.SMTPException, OSError) as exc:
            raise DestinationSendError(f"smtp delivery failed: {exc}") from exc
        logger.debug("mail_sent", to=self._config.to_addresses)
