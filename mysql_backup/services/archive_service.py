"""
Servicio que comprime el directorio de la ejecución con 7-Zip
"""
import shutil
import threading
from pathlib import Path
from typing import List, Optional

from ..config import Config
from ..errors import ArchiveError
from ..logger import LoggerService
from ..models import BackupRun, LogEntry, Settings
from ..process import CommandRunner, run_command


class ArchiveService:
    """Comprime el directorio de la ejecución y lo elimina si todo salió bien"""

    def __init__(self, settings: Settings, runner: CommandRunner = run_command):
        self.settings = settings
        self.runner = runner
        self.logger = LoggerService.get_logger("ArchiveService")

    @staticmethod
    def archive_path_for(target_dir: Path) -> Path:
        return target_dir.with_name(target_dir.name + Config.ARCHIVE_EXTENSION)

    def build_command(self, target_dir: Path, archive_path: Path) -> List[str]:
        return [
            self.settings.seven_zip_path,
            'a', str(archive_path), str(target_dir),
            '-t7z',
            '-mx9',       # Compresión máxima
            '-mmt=on',    # Usar todos los núcleos
            '-sdel',      # Borrar archivos fuente al terminar
            '-bb1',
        ]

    def archive(self, run: BackupRun, cancel_event: Optional[threading.Event] = None) -> Path:
        """
        Comprime run.target_dir en un único archivo .7z

        Args:
            run: Ejecución en curso
            cancel_event: Evento de cancelación

        Returns:
            Ruta del archivo generado

        Raises:
            ArchiveError: Si la compresión falla o el archivo no existe
        """
        target_dir = run.target_dir
        archive_path = self.archive_path_for(target_dir)
        self.logger.info(f"Comprimiendo {target_dir} -> {archive_path.name}")

        if not shutil.which(self.settings.seven_zip_path):
            raise ArchiveError(f"La herramienta {self.settings.seven_zip_path} no está instalada")

        try:
            result = self.runner(
                self.build_command(target_dir, archive_path),
                timeout=self.settings.archive_timeout,
                cancel_event=cancel_event,
            )
        except OSError as e:
            raise ArchiveError(f"No se pudo ejecutar {self.settings.seven_zip_path}: {e}") from e

        output = result.output.strip()

        if not result.success:
            failure = result.describe_failure(self.settings.archive_timeout)
            run.append(LogEntry(output=output, error=f"7z falló: {failure}"))
            raise ArchiveError(f"Falló la compresión de {target_dir.name}: {failure}")

        if not archive_path.exists():
            run.append(LogEntry(output=output, error="el archivo comprimido no existe"))
            raise ArchiveError(f"7z terminó sin generar {archive_path}")

        run.append(LogEntry(output=output))

        # -sdel borra los archivos pero puede dejar el directorio vacío
        if target_dir.exists() and not any(target_dir.iterdir()):
            target_dir.rmdir()

        size_mb = archive_path.stat().st_size / (1024 * 1024)
        self.logger.info(f"Archivo generado: {archive_path.name} ({size_mb:.2f} MB)")
        return archive_path
