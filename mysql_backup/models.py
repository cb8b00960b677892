"""
Modelos de datos del sistema
"""
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple

from .config import Config


@dataclass(frozen=True)
class ServerConfig:
    """Parámetros de conexión al servidor MySQL/MariaDB"""
    host: str
    user: str
    password: str = ''
    port: int = Config.DEFAULT_PORT
    type: str = 'mysql'

    def __post_init__(self):
        """Validación después de inicialización"""
        if not self.host:
            raise ValueError("El host del servidor es obligatorio")
        if not self.user:
            raise ValueError("El usuario del servidor es obligatorio")
        if not 0 < self.port < 65536:
            raise ValueError(f"Puerto inválido: {self.port}")
        if self.type.lower() not in Config.SUPPORTED_DB_TYPES:
            raise ValueError(f"Tipo de base de datos no soportado: {self.type}")


@dataclass(frozen=True)
class MailConfig:
    """Credenciales e identidades para la notificación por correo"""
    host: str
    sender: str
    recipients: Tuple[str, ...]
    port: int = Config.DEFAULT_SMTP_PORT
    user: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = True

    def __post_init__(self):
        if not self.host:
            raise ValueError("SMTP_HOST es obligatorio para notificar")
        if not self.sender:
            raise ValueError("MAIL_FROM es obligatorio para notificar")
        if not self.recipients:
            raise ValueError("MAIL_TO debe tener al menos un destinatario")


@dataclass(frozen=True)
class Settings:
    """Configuración inmutable de una ejecución"""
    server: ServerConfig
    save_dir: Path
    mysqldump_dir: Optional[Path] = None
    seven_zip_path: str = Config.DEFAULT_SEVEN_ZIP
    excluded_databases: FrozenSet[str] = frozenset()
    exclude_system_schemas: bool = False
    continue_on_table_failure: bool = False
    dump_charset: str = Config.DEFAULT_CHARSET
    dump_timeout: Optional[float] = Config.DEFAULT_DUMP_TIMEOUT
    archive_timeout: Optional[float] = Config.DEFAULT_ARCHIVE_TIMEOUT
    mail: Optional[MailConfig] = None
    log_dir: Optional[Path] = None
    log_level: int = Config.LOG_LEVEL

    def __post_init__(self):
        if self.save_dir is None:
            raise ValueError("SAVE_FOLDER es obligatorio")
        for name in ('dump_timeout', 'archive_timeout'):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} debe ser mayor a 0")

    @property
    def effective_exclusions(self) -> FrozenSet[str]:
        """Exclusiones configuradas, más los esquemas de sistema si se habilitó"""
        if self.exclude_system_schemas:
            return self.excluded_databases | Config.SYSTEM_SCHEMAS
        return self.excluded_databases


@dataclass(frozen=True)
class Database:
    """Base de datos descubierta con sus tablas"""
    name: str
    tables: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LogEntry:
    """Una entrada del log de la ejecución"""
    output: str
    database: Optional[str] = None
    table: Optional[str] = None
    error: Optional[str] = None

    def render(self) -> str:
        lines = []
        if self.output:
            lines.append(self.output)
        if self.error:
            target = f"{self.database}.{self.table}: " if self.database and self.table else ""
            lines.append(f"ERROR {target}{self.error}")
        return "\n".join(lines)


@dataclass
class BackupRun:
    """Estado de una ejecución; el log solo crece por append()"""
    timestamp: datetime
    target_dir: Path
    _log: List[LogEntry] = field(default_factory=list, repr=False)

    @classmethod
    def start(cls, save_dir: Path, now: Optional[datetime] = None) -> 'BackupRun':
        timestamp = now or datetime.now()
        return cls(timestamp=timestamp, target_dir=Path(save_dir) / timestamp.strftime(Config.RUN_DIR_FORMAT))

    @property
    def log(self) -> Tuple[LogEntry, ...]:
        return tuple(self._log)

    def append(self, entry: LogEntry):
        self._log.append(entry)

    def render_log(self) -> str:
        """Texto del log, una línea (o bloque) por entrada"""
        return "\n".join(text for text in (e.render() for e in self._log) if text).strip()


@dataclass
class BackupReport:
    """Resultado final de una ejecución"""
    success: bool
    log_text: str
    error: Optional[Exception] = None
    archive_path: Optional[Path] = None
    notified: bool = False

    def __str__(self):
        if self.success:
            return f"✓ Backup completo: {self.archive_path or 'sin archivo'}"
        else:
            return f"✗ Backup fallido: {self.error}"
