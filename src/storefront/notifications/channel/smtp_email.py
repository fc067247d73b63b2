"""SMTP email adapter backed by aiosmtplib.

Sends are queued on a small thread pool and run there on their own event
loop, so a slow or unreachable mail server never holds up the request that
triggered the notification. Failures surface in the logs only.
"""

import asyncio
import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid

import aiosmtplib
import structlog

from storefront.notifications.channel.email_port import EmailPort

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    username: str
    password: str
    secure: bool = False
    sender: str = ""
    timeout: float = 30.0

    @classmethod
    def from_env(cls, environ=None) -> "SmtpSettings | None":
        """Read SMTP_* variables; None when any connection setting is missing."""
        environ = os.environ if environ is None else environ
        host = environ.get("SMTP_HOST")
        port = environ.get("SMTP_PORT")
        username = environ.get("SMTP_USER")
        password = environ.get("SMTP_PASS")
        if not (host and port and username and password):
            return None

        return cls(
            host=host,
            port=int(port),
            username=username,
            password=password,
            secure=environ.get("SMTP_SECURE", "false").lower() == "true",
            sender=environ.get("EMAIL_FROM") or username,
        )


class SmtpEmailAdapter(EmailPort):
    def __init__(self, settings: SmtpSettings, max_workers: int = 4):
        self.settings = settings
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="smtp")

    def _build_message(self, to, subject, body, html_body=None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.settings.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content(body)
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    async def _deliver(self, message: EmailMessage):
        return await aiosmtplib.send(
            message,
            hostname=self.settings.host,
            port=self.settings.port,
            username=self.settings.username,
            password=self.settings.password,
            use_tls=self.settings.secure,
            start_tls=False if self.settings.secure else None,
            timeout=self.settings.timeout,
        )

    def _run(self, message: EmailMessage):
        return asyncio.run(self._deliver(message))

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        message = self._build_message(to, subject, body, html_body)
        message_id = message["Message-ID"]

        future = self._executor.submit(self._run, message)
        future.add_done_callback(lambda f: self._log_outcome(f, to=to, subject=subject, message_id=message_id))

        return {"message_id": message_id, "status": "sent"}

    @staticmethod
    def _log_outcome(future: Future, **fields) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("SMTP delivery failed", error=str(exc), **fields)
        else:
            logger.info("SMTP delivery accepted", **fields)

    def shutdown(self, wait: bool = True) -> None:
        """Drain queued sends and stop the worker threads."""
        self._executor.shutdown(wait=wait)
