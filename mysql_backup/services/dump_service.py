"""
Servicio que exporta cada tabla con la herramienta externa
"""
import threading
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import DumpError, RunCancelledError
from ..logger import LoggerService
from ..models import BackupRun, Database, Settings
from ..strategies.base_strategy import BackupStrategy, dump_file_name


class DumpService:
    """Ejecuta una exportación por (base de datos, tabla), en orden"""

    def __init__(self, settings: Settings, strategy: BackupStrategy):
        """
        Inicializa el servicio

        Args:
            settings: Configuración de la ejecución
            strategy: Estrategia de exportación a usar
        """
        self.settings = settings
        self.strategy = strategy
        self.logger = LoggerService.get_logger("DumpService")

    def dump_all(self, run: BackupRun, databases: Sequence[Database],
                 cancel_event: Optional[threading.Event] = None) -> int:
        """
        Exporta todas las tablas descubiertas al directorio de la ejecución

        Por defecto se detiene en la primera tabla que falla; los archivos ya
        generados quedan en disco. Con continue_on_table_failure se intentan
        todas las tablas y al final se reportan las fallidas.

        Args:
            run: Ejecución en curso (recibe las entradas de log)
            databases: Resultado del descubrimiento
            cancel_event: Evento de cancelación

        Returns:
            Cantidad de tablas exportadas

        Raises:
            DumpError: Si alguna exportación falla
            RunCancelledError: Si se solicitó cancelar
        """
        pairs = [(db.name, table) for db in databases for table in db.tables]
        if not pairs:
            return 0

        self._check_file_names(pairs)

        tool_error = self.strategy.validate_tools()
        if tool_error:
            raise DumpError(tool_error)

        failures: List[Tuple[str, str]] = []
        dumped = 0

        for index, (database, table) in enumerate(pairs, 1):
            if cancel_event is not None and cancel_event.is_set():
                raise RunCancelledError(f"Cancelado antes de exportar {database}.{table}")

            self.logger.info(f"[{index}/{len(pairs)}] {database}.{table}")
            entry = self.strategy.execute_dump(database, table, run.target_dir, cancel_event)
            run.append(entry)

            if entry.error is None:
                dumped += 1
                continue

            if cancel_event is not None and cancel_event.is_set():
                raise RunCancelledError(f"Cancelado durante la exportación de {database}.{table}")

            if not self.settings.continue_on_table_failure:
                raise DumpError(f"{database}.{table}: {entry.error}", database=database, table=table)

            failures.append((database, table))

        if failures:
            failed = ', '.join(f"{db}.{table}" for db, table in failures)
            raise DumpError(f"{len(failures)} tabla(s) fallaron: {failed}")

        return dumped

    @staticmethod
    def _check_file_names(pairs: Sequence[Tuple[str, str]]):
        """Falla si dos pares distintos producirían el mismo archivo"""
        seen: Dict[str, Tuple[str, str]] = {}
        for pair in pairs:
            name = dump_file_name(*pair)
            if name in seen:
                first = seen[name]
                raise DumpError(
                    f"{first[0]}.{first[1]} y {pair[0]}.{pair[1]} generan el mismo archivo {name}"
                )
            seen[name] = pair
