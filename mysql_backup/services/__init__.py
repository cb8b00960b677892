"""
Servicios de la aplicación
"""
from .archive_service import ArchiveService
from .backup_service import BackupService
from .discovery_service import DiscoveryService
from .dump_service import DumpService
from .notification_service import MailTransport, NotificationService, SmtpTransport

__all__ = [
    'ArchiveService',
    'BackupService',
    'DiscoveryService',
    'DumpService',
    'MailTransport',
    'NotificationService',
    'SmtpTransport'
]
