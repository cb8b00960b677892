"""
Excepciones del dominio de backup

Toda falla esperada del proceso se expresa con una subclase de BackupError.
"""
from typing import Optional


class BackupError(Exception):
    """Error base del proceso de backup"""


class DatabaseConnectionError(BackupError):
    """No se pudo conectar al servidor de base de datos"""


class QueryError(BackupError):
    """Falló el listado de bases de datos o tablas"""


class DumpError(BackupError):
    """La herramienta de exportación reportó un fallo"""

    def __init__(self, message: str, database: Optional[str] = None, table: Optional[str] = None):
        super().__init__(message)
        self.database = database
        self.table = table


class ArchiveError(BackupError):
    """La herramienta de compresión reportó un fallo"""


class OutputDirectoryError(BackupError):
    """No se pudo crear el directorio de la ejecución"""


class RunCancelledError(BackupError):
    """La ejecución fue cancelada antes de terminar"""


class NotificationError(BackupError):
    """Falló el envío de la notificación (no es fatal)"""
