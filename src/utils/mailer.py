import aiosmtplib
import structlog

from email.message import EmailMessage
from typing import List, Optional

from fastapi import Depends

from core.config import Settings, get_settings


log = structlog.get_logger()


class MailDeliveryError(Exception):
    pass


class Mailer:
    """
    Envio de e-mail em texto puro via SMTP.

    ``secure=True`` usa TLS implícito (porta 465); caso contrário o
    aiosmtplib faz STARTTLS se o servidor oferecer.
    """

    def __init__(self, host: str, port: int = 587, secure: bool = False,
                 username: Optional[str] = None, password: Optional[str] = None,
                 sender: str = "noreply@example.com"):
        self.host = host
        self.port = port
        self.secure = secure
        self.username = username
        self.password = password
        self.sender = sender

    def build_message(self, to: List[str], subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = ", ".join(to)
        message["Subject"] = subject
        message.set_content(body)
        return message

    async def send(self, to: List[str], subject: str, body: str):
        try:
            message = self.build_message(to, subject, body)
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                use_tls=self.secure,
                username=self.username or None,
                password=self.password if self.username else None,
            )
        except (aiosmtplib.SMTPException, OSError, ValueError) as e:
            log.error("mail.transport_error", host=self.host, port=self.port, error=str(e))
            raise MailDeliveryError(str(e)) from e
        log.info("mail.delivered", host=self.host, to=to)


def get_mailer(settings: Settings = Depends(get_settings)) -> Optional[Mailer]:
    """
    Sem ``SMTP_HOST`` não há transporte: a rota grava o e-mail como ``mocked``.
    """
    if not settings.SMTP_HOST:
        return None
    return Mailer(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        secure=settings.SMTP_SECURE,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASS,
        sender=settings.SMTP_FROM,
    )
