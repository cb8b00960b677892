"""
Servicio de notificación por correo del resultado de la ejecución
"""
import html
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Optional

from ..config import Config
from ..errors import NotificationError
from ..logger import LoggerService
from ..models import BackupRun, MailConfig

SMTP_TIMEOUT = 60
SUBJECT_MAX_ERROR = 200


class MailTransport(ABC):
    """Interfaz para enviar un correo"""

    @abstractmethod
    def send(self, subject: str, html_body: str):
        """
        Envía el correo

        Raises:
            NotificationError: Si el envío falla
        """
        pass


class SmtpTransport(MailTransport):
    """Envío por SMTP (con STARTTLS opcional)"""

    def __init__(self, mail: Optional[MailConfig]):
        self.mail = mail

    def build_message(self, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message['Subject'] = subject
        message['From'] = self.mail.sender
        message['To'] = ', '.join(self.mail.recipients)
        message.set_content(html_body, subtype='html')
        return message

    def send(self, subject: str, html_body: str):
        if self.mail is None:
            raise NotificationError("No hay configuración de correo (SMTP_HOST)")

        try:
            message = self.build_message(subject, html_body)
        except ValueError as e:
            raise NotificationError(f"Mensaje inválido: {e}") from e

        try:
            with smtplib.SMTP(self.mail.host, self.mail.port, timeout=SMTP_TIMEOUT) as smtp:
                if self.mail.use_tls:
                    smtp.starttls()
                if self.mail.user:
                    smtp.login(self.mail.user, self.mail.password or '')
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Error enviando correo via {self.mail.host}: {e}") from e


class NotificationService:
    """Formatea el resumen de la ejecución y lo envía una sola vez"""

    def __init__(self, transport: MailTransport):
        self.transport = transport
        self.logger = LoggerService.get_logger("NotificationService")

    @staticmethod
    def build_subject(error: Optional[Exception]) -> str:
        if error is None:
            return Config.SUCCESS_SUBJECT
        # Los headers no admiten saltos de línea
        text = " ".join(str(error).split())
        if len(text) > SUBJECT_MAX_ERROR:
            text = text[:SUBJECT_MAX_ERROR - 3] + "..."
        return Config.ERROR_SUBJECT_TEMPLATE.format(error=text)

    @staticmethod
    def build_body(log_text: str) -> str:
        """Log en HTML, saltos de línea como <br>"""
        return html.escape(log_text).replace('\r\n', '\n').replace('\n', '<br>\n')

    def notify(self, run: BackupRun, error: Optional[Exception] = None) -> bool:
        """
        Envía la notificación; un fallo de envío solo se registra

        Args:
            run: Ejecución terminada
            error: Error terminal de la ejecución, si lo hubo

        Returns:
            True si el correo fue enviado
        """
        subject = self.build_subject(error)
        body = self.build_body(run.render_log())

        try:
            self.transport.send(subject, body)
        except NotificationError as e:
            self.logger.error(f"No se pudo enviar la notificación: {e}")
            return False

        self.logger.info(f"Notificación enviada: {subject}")
        return True
