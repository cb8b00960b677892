"""
Servicio de logging siguiendo principio Single Responsibility
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import Config


class LoggerService:
    """Servicio centralizado de logging"""

    _loggers = {}
    _log_dir: Optional[Path] = None
    _level = Config.LOG_LEVEL

    @classmethod
    def configure(cls, log_dir: Optional[Path] = None, level: int = Config.LOG_LEVEL):
        """
        Define destino y nivel de los logs; reconfigura los loggers ya creados

        Args:
            log_dir: Directorio para archivos de log (None = solo consola)
            level: Nivel de logging
        """
        cls._log_dir = Path(log_dir) if log_dir else None
        cls._level = level

        for name, logger in cls._loggers.items():
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
            cls._setup_logger(name)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Obtiene o crea un logger con el nombre especificado

        Args:
            name: Nombre del logger

        Returns:
            Logger configurado
        """
        if name in cls._loggers:
            return cls._loggers[name]

        logger = cls._setup_logger(name)
        cls._loggers[name] = logger
        return logger

    @classmethod
    def _setup_logger(cls, name: str) -> logging.Logger:
        """
        Configura un nuevo logger

        Args:
            name: Nombre del logger

        Returns:
            Logger configurado
        """
        logger = logging.getLogger(f"mysql_backup.{name}")
        logger.setLevel(cls._level)
        logger.propagate = False

        # Evitar duplicar handlers
        if logger.handlers:
            return logger

        formatter = logging.Formatter(Config.LOG_FORMAT)

        # Handler para consola
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(cls._level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # Handler para archivo
        if cls._log_dir is not None:
            cls._log_dir.mkdir(parents=True, exist_ok=True)
            log_file = cls._log_dir / f"{name}_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(cls._level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger
