"""
Dobles de prueba para herramientas externas, base de datos y correo
"""
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy.exc import OperationalError, ProgrammingError

from mysql_backup.errors import NotificationError
from mysql_backup.models import ServerConfig, Settings
from mysql_backup.process import CommandResult
from mysql_backup.services.notification_service import MailTransport


def make_settings(save_dir: Path, **overrides) -> Settings:
    """Settings mínimos para tests"""
    values = dict(
        server=ServerConfig(host='db.local', user='backup', password='secreto'),
        save_dir=Path(save_dir),
        seven_zip_path='7z',
    )
    values.update(overrides)
    return Settings(**values)


class FakeDumpRunner:
    """Simula mysqldump: escribe el --result-file o falla para ciertas tablas"""

    def __init__(self, failing_tables=(), output='', warning=True):
        self.failing_tables = set(failing_tables)
        self.output = output
        self.warning = warning
        self.calls: List[List[str]] = []

    def __call__(self, cmd, cwd=None, timeout=None, cancel_event=None):
        self.calls.append(list(cmd))
        table = cmd[cmd.index('--port') + 3]
        result_file = Path(cmd[cmd.index('--result-file') + 1])

        text = self.output
        if self.warning:
            tool = Path(cmd[0]).name
            text = f"{tool}: [Warning] Using a password on the command line interface can be insecure.\n{text}"

        if table in self.failing_tables:
            return CommandResult(returncode=2, output=text + f"Got error: 1146: Table '{table}' doesn't exist")

        result_file.write_text(f"INSERT INTO `{table}` VALUES (1);\n", encoding='utf-8')
        return CommandResult(returncode=0, output=text)

    @property
    def dumped_tables(self) -> List[str]:
        return [cmd[cmd.index('--port') + 3] for cmd in self.calls]


class FakeArchiveRunner:
    """Simula 7z con -sdel: crea el .7z y borra los archivos fuente"""

    def __init__(self, returncode=0, create_archive=True, remove_dir=False):
        self.returncode = returncode
        self.create_archive = create_archive
        self.remove_dir = remove_dir
        self.calls: List[List[str]] = []

    def __call__(self, cmd, cwd=None, timeout=None, cancel_event=None):
        self.calls.append(list(cmd))
        archive_path, target_dir = Path(cmd[2]), Path(cmd[3])

        if self.returncode != 0:
            return CommandResult(returncode=self.returncode, output="ERROR: disco lleno")

        if self.create_archive:
            archive_path.write_bytes(b'7z\xbc\xaf\x27\x1c')
            for item in target_dir.iterdir():
                item.unlink()
            if self.remove_dir:
                target_dir.rmdir()
        return CommandResult(returncode=0, output="Everything is Ok")


class _Result:
    def __init__(self, rows):
        self._rows = rows

    def scalars(self):
        return self

    def all(self):
        return list(self._rows)


class _Connection:
    def __init__(self, server: 'FakeServer', database: Optional[str]):
        self.server = server
        self.database = database

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.server.open_connections -= 1
        return False

    def execute(self, statement):
        sql = str(statement)
        if self.database in self.server.failing_queries:
            raise ProgrammingError(sql, {}, Exception("permiso denegado"))
        if sql == "SHOW DATABASES":
            return _Result(self.server.databases.keys())
        if sql == "SHOW TABLES":
            return _Result(self.server.databases[self.database])
        raise AssertionError(f"Consulta inesperada: {sql}")


class _Engine:
    def __init__(self, server: 'FakeServer', database: Optional[str]):
        self.server = server
        self.database = database
        self.disposed = False

    def connect(self):
        if self.server.unreachable:
            raise OperationalError("connect", {}, Exception("Can't connect to MySQL server"))
        self.server.open_connections += 1
        self.server.connected_to.append(self.database)
        return _Connection(self.server, self.database)

    def dispose(self):
        self.disposed = True


class FakeServer:
    """Servidor MySQL en memoria que actúa como engine_factory"""

    def __init__(self, databases: Dict[str, List[str]], unreachable=False, failing_queries=()):
        self.databases = databases
        self.unreachable = unreachable
        self.failing_queries = set(failing_queries)
        self.connected_to: List[Optional[str]] = []
        self.engines: List[_Engine] = []
        self.open_connections = 0

    def __call__(self, url, **kwargs):
        engine = _Engine(self, url.database)
        self.engines.append(engine)
        return engine


class FakeTransport(MailTransport):
    """Transporte de correo que guarda los mensajes o falla"""

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.attempts = 0

    def send(self, subject, html_body):
        self.attempts += 1
        if self.fail:
            raise NotificationError("SMTP no disponible")
        self.sent.append((subject, html_body))
