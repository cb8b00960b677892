"""
Factory para crear estrategias de exportación
"""
from typing import Optional

from ..models import Settings
from ..process import CommandRunner, run_command
from ..strategies.base_strategy import BackupStrategy
from ..strategies.mysql_strategy import MariaDBBackupStrategy, MySQLBackupStrategy


class BackupStrategyFactory:
    """Factory para crear estrategias de exportación (Factory Pattern)"""

    # Mapeo de tipos a estrategias
    _strategies = {
        'mysql': MySQLBackupStrategy,
        'mariadb': MariaDBBackupStrategy,
    }

    @classmethod
    def create(cls, settings: Settings, runner: CommandRunner = run_command) -> Optional[BackupStrategy]:
        """
        Crea la estrategia según el tipo de servidor configurado

        Args:
            settings: Configuración de la ejecución
            runner: Función que ejecuta procesos externos

        Returns:
            Instancia de BackupStrategy o None si el tipo no es soportado
        """
        strategy_class = cls._strategies.get(settings.server.type.lower())
        if strategy_class:
            return strategy_class(settings, runner)
        return None
