"""
Constantes del sistema de backup

Los valores que dependen del entorno viven en Settings (ver models.py) y se
construyen una sola vez en SettingsRepository.
"""
import logging


class Config:
    """Constantes compartidas por todos los componentes"""

    LOG_LEVEL = logging.INFO
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # Nombre del directorio de cada ejecución (ordenable)
    RUN_DIR_FORMAT = '%Y-%m-%d_%H-%M-%S'

    DUMP_FILE_TEMPLATE = '{database}-{table}.sql'
    ARCHIVE_EXTENSION = '.7z'

    # Esquemas internos del servidor, solo se excluyen si EXCLUDE_SYSTEM_SCHEMAS=true
    SYSTEM_SCHEMAS = frozenset({'information_schema', 'mysql', 'performance_schema', 'sys'})

    PASSWORD_WARNING = '[Warning] Using a password on the command line interface can be insecure.'

    DEFAULT_PORT = 3306
    DEFAULT_SMTP_PORT = 587
    DEFAULT_DUMP_TIMEOUT = 3600.0
    DEFAULT_ARCHIVE_TIMEOUT = 3600.0
    DEFAULT_CHARSET = 'utf8'
    DEFAULT_SEVEN_ZIP = '7z'

    SUPPORTED_DB_TYPES = ['mysql', 'mariadb']

    SUCCESS_SUBJECT = 'Backup de bases de datos: OK'
    ERROR_SUBJECT_TEMPLATE = 'Backup de bases de datos: ERROR - {error}'
