"""
Estrategias de exportación para diferentes herramientas de dump
"""
from .base_strategy import BackupStrategy, dump_file_name
from .mysql_strategy import MariaDBBackupStrategy, MySQLBackupStrategy

__all__ = [
    'BackupStrategy',
    'MariaDBBackupStrategy',
    'MySQLBackupStrategy',
    'dump_file_name'
]
