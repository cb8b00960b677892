"""
Repositorio para construir la configuración desde el entorno (Dependency Inversion)
"""
import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from ..config import Config
from ..logger import LoggerService
from ..models import MailConfig, ServerConfig, Settings

_TRUE_VALUES = {'1', 'true', 'yes', 'on', 'si', 'sí'}


class SettingsRepository:
    """Repositorio que lee variables de entorno (y .env) y produce Settings"""

    def __init__(self, env_file: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        """
        Inicializa el repositorio

        Args:
            env_file: Ruta a un archivo .env (opcional, se busca desde el cwd si falta)
            environ: Mapa de variables a usar en lugar de os.environ (tests)
        """
        self.env_file = env_file
        self._environ = environ
        self.logger = LoggerService.get_logger("SettingsRepository")

    def load(self) -> Settings:
        """
        Construye la configuración inmutable de la ejecución

        Returns:
            Objeto Settings

        Raises:
            ValueError: Si falta un valor obligatorio o alguno es inválido
        """
        if self._environ is None:
            env_file = self.env_file or find_dotenv(usecwd=True)
            if env_file:
                load_dotenv(env_file)
                self.logger.debug(f"Variables cargadas desde {env_file}")
            env = os.environ
        else:
            env = self._environ

        server = ServerConfig(
            host=self._get(env, 'DB_HOST'),
            port=self._get_int(env, 'DB_PORT', Config.DEFAULT_PORT),
            user=self._get(env, 'DB_USER'),
            password=env.get('DB_PASS', ''),
            type=self._get(env, 'DB_TYPE', 'mysql').lower(),
        )

        save_folder = self._get(env, 'SAVE_FOLDER')
        if not save_folder:
            raise ValueError("SAVE_FOLDER es obligatorio")

        mysqldump_dir = self._get(env, 'MYSQLDUMP_DIR')
        log_dir = self._get(env, 'LOG_DIR')

        return Settings(
            server=server,
            save_dir=Path(save_folder),
            mysqldump_dir=Path(mysqldump_dir) if mysqldump_dir else None,
            seven_zip_path=self._get(env, '7ZIP_PATH', Config.DEFAULT_SEVEN_ZIP),
            excluded_databases=frozenset(self._get_list(env, 'EXCLUDE_DATABASES')),
            exclude_system_schemas=self._get_bool(env, 'EXCLUDE_SYSTEM_SCHEMAS', False),
            continue_on_table_failure=self._get_bool(env, 'CONTINUE_ON_TABLE_FAILURE', False),
            dump_charset=self._get(env, 'DUMP_CHARSET', Config.DEFAULT_CHARSET),
            dump_timeout=self._get_timeout(env, 'DUMP_TIMEOUT', Config.DEFAULT_DUMP_TIMEOUT),
            archive_timeout=self._get_timeout(env, 'ARCHIVE_TIMEOUT', Config.DEFAULT_ARCHIVE_TIMEOUT),
            mail=self._load_mail(env),
            log_dir=Path(log_dir) if log_dir else None,
            log_level=self._get_log_level(env),
        )

    def _load_mail(self, env: Mapping[str, str]) -> Optional[MailConfig]:
        """Configuración de correo, o None si no hay SMTP_HOST"""
        host = self._get(env, 'SMTP_HOST')
        if not host:
            self.logger.warning("SMTP_HOST no configurado: la notificación no se podrá enviar")
            return None

        return MailConfig(
            host=host,
            port=self._get_int(env, 'SMTP_PORT', Config.DEFAULT_SMTP_PORT),
            user=self._get(env, 'SMTP_USER') or None,
            password=env.get('SMTP_PASS') or None,
            use_tls=self._get_bool(env, 'SMTP_USE_TLS', True),
            sender=self._get(env, 'MAIL_FROM'),
            recipients=self._get_list(env, 'MAIL_TO'),
        )

    @staticmethod
    def _get(env: Mapping[str, str], key: str, default: str = '') -> str:
        value = env.get(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    @classmethod
    def _get_list(cls, env: Mapping[str, str], key: str) -> Tuple[str, ...]:
        """Lista separada por comas; cada elemento sin espacios, vacíos descartados"""
        raw = cls._get(env, key)
        return tuple(item.strip() for item in raw.split(',') if item.strip())

    @classmethod
    def _get_bool(cls, env: Mapping[str, str], key: str, default: bool) -> bool:
        raw = cls._get(env, key)
        if not raw:
            return default
        return raw.lower() in _TRUE_VALUES

    @classmethod
    def _get_int(cls, env: Mapping[str, str], key: str, default: int) -> int:
        raw = cls._get(env, key)
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{key} debe ser un número entero: {raw!r}") from None

    @classmethod
    def _get_timeout(cls, env: Mapping[str, str], key: str, default: float) -> Optional[float]:
        """Segundos; '0' desactiva el timeout"""
        raw = cls._get(env, key)
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError:
            raise ValueError(f"{key} debe ser un número: {raw!r}") from None
        return value if value > 0 else None

    @classmethod
    def _get_log_level(cls, env: Mapping[str, str]) -> int:
        raw = cls._get(env, 'LOG_LEVEL', 'INFO').upper()
        level = logging.getLevelName(raw)
        if not isinstance(level, int):
            raise ValueError(f"LOG_LEVEL inválido: {raw}")
        return level
