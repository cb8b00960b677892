"""
Servicio principal que orquesta los backups
"""
import threading
import time
from typing import Optional

from ..errors import BackupError, DumpError, OutputDirectoryError, RunCancelledError
from ..factories.strategy_factory import BackupStrategyFactory
from ..logger import LoggerService
from ..models import BackupReport, BackupRun, LogEntry, Settings
from .archive_service import ArchiveService
from .discovery_service import DiscoveryService
from .dump_service import DumpService
from .notification_service import NotificationService, SmtpTransport


class BackupService:
    """Servicio principal: descubrir -> exportar -> comprimir -> notificar"""

    def __init__(self, settings: Settings,
                 discovery_service: Optional[DiscoveryService] = None,
                 dump_service: Optional[DumpService] = None,
                 archive_service: Optional[ArchiveService] = None,
                 notification_service: Optional[NotificationService] = None):
        """
        Inicializa el servicio de backup

        Los colaboradores que no se indiquen se construyen a partir de settings.

        Args:
            settings: Configuración de la ejecución
            discovery_service: Descubrimiento de bases y tablas
            dump_service: Exportación de tablas
            archive_service: Compresión del directorio
            notification_service: Envío del resumen
        """
        self.settings = settings
        self.logger = LoggerService.get_logger("BackupService")

        if dump_service is None:
            strategy = BackupStrategyFactory.create(settings)
            if strategy is None:
                raise ValueError(f"Tipo de base de datos no soportado: {settings.server.type}")
            dump_service = DumpService(settings, strategy)

        self.discovery_service = discovery_service or DiscoveryService(settings)
        self.dump_service = dump_service
        self.archive_service = archive_service or ArchiveService(settings)
        self.notification_service = notification_service or NotificationService(SmtpTransport(settings.mail))

    def run(self, cancel_event: Optional[threading.Event] = None) -> BackupReport:
        """
        Ejecuta un backup completo

        Cualquier BackupError corta la ejecución y pasa directo a notificar.

        Args:
            cancel_event: Evento de cancelación

        Returns:
            Reporte de la ejecución
        """
        run = BackupRun.start(self.settings.save_dir)
        start_time = time.time()
        archive_path = None
        error = None

        self.logger.info("=" * 70)
        self.logger.info(f"INICIANDO BACKUP DE {self.settings.server.host}:{self.settings.server.port}")
        self.logger.info("=" * 70)

        try:
            databases = self.discovery_service.discover()
            self._create_target_dir(run)

            dumped = self.dump_service.dump_all(run, databases, cancel_event)

            if dumped == 0:
                run.append(LogEntry(output="No hay tablas para exportar, nada que comprimir"))
                self.logger.warning("No se exportó ninguna tabla, se omite la compresión")
                run.target_dir.rmdir()
            else:
                if cancel_event is not None and cancel_event.is_set():
                    raise RunCancelledError("Cancelado antes de comprimir")
                archive_path = self.archive_service.archive(run, cancel_event)

        except BackupError as e:
            error = e
            self.logger.error(f"Backup interrumpido: {e}")
            if isinstance(e, DumpError) and run.target_dir.exists():
                self.logger.info(f"Archivos conservados para inspección en {run.target_dir}")
        except Exception as e:
            self.logger.exception(f"Error inesperado durante el backup: {e}")
            try:
                self.notification_service.notify(run, e)
            except Exception as notify_error:
                self.logger.error(f"Falló la notificación del error inesperado: {notify_error}")
            raise

        notified = self.notification_service.notify(run, error)

        report = BackupReport(
            success=error is None,
            log_text=run.render_log(),
            error=error,
            archive_path=archive_path,
            notified=notified,
        )
        self._print_summary(report, time.time() - start_time)
        return report

    def _create_target_dir(self, run: BackupRun):
        try:
            run.target_dir.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise OutputDirectoryError(f"No se pudo crear {run.target_dir}: {e}") from e
        self.logger.info(f"Directorio de la ejecución: {run.target_dir}")

    def _print_summary(self, report: BackupReport, duration: float):
        """
        Imprime resumen de la operación de backup

        Args:
            report: Reporte de la ejecución
            duration: Segundos totales
        """
        self.logger.info("=" * 70)
        self.logger.info("RESUMEN DEL PROCESO DE BACKUP")
        self.logger.info("=" * 70)
        self.logger.info(str(report))
        self.logger.info(f"Tiempo total: {duration:.2f}s")
        self.logger.info(f"Notificación enviada: {'sí' if report.notified else 'no'}")
        self.logger.info("=" * 70)

        if not report.success:
            self.logger.warning("ATENCIÓN: el backup falló. Revisa los errores arriba.")
