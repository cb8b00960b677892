"""
Estrategia de exportación para MySQL/MariaDB
"""
from pathlib import Path
from typing import List

from .base_strategy import BackupStrategy


class MySQLBackupStrategy(BackupStrategy):
    """Exporta una tabla con mysqldump, solo datos"""

    tool_name = 'mysqldump'

    def build_command(self, database: str, table: str, output_file: Path) -> List[str]:
        server = self.settings.server
        return [
            self.tool_path,
            '-u', server.user,
            f'--password={server.password}',
            '--host', server.host,
            '--port', str(server.port),
            database,
            table,
            '--skip-lock-tables',      # No bloquear tablas
            '--single-transaction',    # Snapshot consistente (InnoDB)
            '--quick',                 # Filas en streaming
            '--result-file', str(output_file),
            f'--default-character-set={self.settings.dump_charset}',
            '--no-create-db',
            '--no-create-info',        # Solo datos
            '--skip-add-drop-table',
            '--protocol=tcp',
        ]


class MariaDBBackupStrategy(MySQLBackupStrategy):
    """Mismas opciones, binario de MariaDB"""

    tool_name = 'mariadb-dump'
