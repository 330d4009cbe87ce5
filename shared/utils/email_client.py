import smtplib
import socket
import logging
import time
from typing import List, Optional
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from contextlib import contextmanager

logger = logging.getLogger(__name__)

# Errors worth one more attempt: dropped or timed out connections
TRANSIENT_SMTP_ERRORS = (
    smtplib.SMTPServerDisconnected,
    ConnectionResetError,
    socket.timeout,
    TimeoutError,
)


class EmailClient:
    """Reusable, fault-tolerant SMTP email client."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        username: str,
        password: str,
        use_ssl: bool = False,
        max_retries: int = 1,
        retry_delay: float = 0.8,
        timeout: int = 10
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

    @contextmanager
    def _connection(self):
        """Context-managed SMTP connection."""
        server = None
        try:
            if self.use_ssl:
                server = smtplib.SMTP_SSL(
                    self.smtp_host, self.smtp_port, timeout=self.timeout)
            else:
                server = smtplib.SMTP(
                    self.smtp_host, self.smtp_port, timeout=self.timeout)
                server.starttls()
            server.login(self.username, self.password)
            yield server
        finally:
            if server:
                try:
                    server.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")

    def _build_message(
        self,
        sender: str,
        recipients: List[str],
        subject: str,
        text_body: str,
        html_body: Optional[str] = None
    ) -> MIMEMultipart:
        """Construct a plain text message with an optional HTML part."""
        msg = MIMEMultipart("alternative")
        msg["From"] = sender
        msg["To"] = ", ".join(recipients)
        msg["Subject"] = subject

        msg.attach(MIMEText(text_body or "", "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))
        return msg

    def send_email(
        self,
        sender: str,
        recipients: List[str],
        subject: str,
        text_body: str,
        html_body: Optional[str] = None
    ) -> None:
        """Send an email, retrying transient connection failures.

        Raises the last SMTP/OS error when delivery is not possible.
        """
        msg = self._build_message(
            sender, recipients, subject, text_body, html_body)

        attempt = 0
        while True:
            try:
                with self._connection() as server:
                    server.sendmail(sender, recipients, msg.as_string())
                logger.info(f"Email sent to {', '.join(recipients)}")
                return
            except TRANSIENT_SMTP_ERRORS as e:
                if attempt >= self.max_retries:
                    raise
                attempt += 1
                logger.warning(
                    f"Transient SMTP error ({e}), retrying {attempt}/{self.max_retries}")
                time.sleep(self.retry_delay)
