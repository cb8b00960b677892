"""
Estrategia base para exportar tablas (Strategy Pattern)
"""
import shutil
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..config import Config
from ..logger import LoggerService
from ..models import LogEntry, Settings
from ..process import CommandRunner, run_command


def dump_file_name(database: str, table: str) -> str:
    """Nombre del archivo de una tabla exportada"""
    return Config.DUMP_FILE_TEMPLATE.format(database=database, table=table)


class BackupStrategy(ABC):
    """Interfaz abstracta para herramientas de exportación (Open/Closed Principle)"""

    tool_name = ''

    def __init__(self, settings: Settings, runner: CommandRunner = run_command):
        """
        Inicializa la estrategia

        Args:
            settings: Configuración de la ejecución
            runner: Función que ejecuta procesos externos
        """
        self.settings = settings
        self.runner = runner
        self.logger = LoggerService.get_logger(self.__class__.__name__)

    @property
    def tool_path(self) -> str:
        """Ruta del ejecutable, dentro de MYSQLDUMP_DIR si está configurado"""
        if self.settings.mysqldump_dir:
            return str(self.settings.mysqldump_dir / self.tool_name)
        return self.tool_name

    @abstractmethod
    def build_command(self, database: str, table: str, output_file: Path) -> List[str]:
        """
        Construye el comando de exportación de una tabla

        Args:
            database: Nombre de la base de datos
            table: Nombre de la tabla
            output_file: Archivo de salida

        Returns:
            Comando y argumentos
        """
        pass

    def clean_output(self, output: str) -> str:
        """Quita la advertencia de contraseña en línea de comandos"""
        warning = f"{self.tool_name}: {Config.PASSWORD_WARNING}"
        return output.replace(warning, '').strip()

    def execute_dump(self, database: str, table: str, target_dir: Path,
                     cancel_event: Optional[threading.Event] = None) -> LogEntry:
        """
        Template method para exportar una tabla con medición de tiempo

        Args:
            database: Nombre de la base de datos
            table: Nombre de la tabla
            target_dir: Directorio de la ejecución
            cancel_event: Evento de cancelación

        Returns:
            Entrada de log; error no es None si la exportación falló
        """
        output_file = target_dir / dump_file_name(database, table)
        self.logger.info(f"Exportando {database}.{table}...")
        start_time = time.time()

        try:
            result = self.runner(
                self.build_command(database, table, output_file),
                cwd=self.settings.mysqldump_dir,
                timeout=self.settings.dump_timeout,
                cancel_event=cancel_event,
            )
        except OSError as e:
            self.logger.error(f"No se pudo ejecutar {self.tool_path}: {e}")
            return LogEntry(output='', database=database, table=table, error=str(e))

        duration = time.time() - start_time
        output = self.clean_output(result.output)

        if result.success:
            size_mb = output_file.stat().st_size / (1024 * 1024) if output_file.exists() else 0.0
            self.logger.info(f"Dump exitoso: {output_file.name} ({size_mb:.2f} MB, {duration:.2f}s)")
            return LogEntry(output=output, database=database, table=table)

        failure = result.describe_failure(self.settings.dump_timeout)
        self.logger.error(f"Dump fallido: {database}.{table} ({failure})")
        return LogEntry(output=output, database=database, table=table,
                        error=f"{self.tool_name} falló: {failure}")

    def validate_tools(self) -> Optional[str]:
        """
        Valida que la herramienta de exportación esté disponible

        Returns:
            None si todo está OK, mensaje de error en caso contrario
        """
        if not shutil.which(self.tool_path):
            return f"La herramienta {self.tool_path} no está instalada"
        return None
