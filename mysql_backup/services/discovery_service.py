"""
Servicio de descubrimiento de bases de datos y tablas
"""
from typing import Callable, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from ..errors import DatabaseConnectionError, QueryError
from ..logger import LoggerService
from ..models import Database, Settings

CONNECT_TIMEOUT = 30


class DiscoveryService:
    """Lista bases de datos y tablas del servidor, aplicando exclusiones"""

    def __init__(self, settings: Settings, engine_factory: Callable[..., Engine] = create_engine):
        """
        Inicializa el servicio

        Args:
            settings: Configuración de la ejecución
            engine_factory: Función que crea engines de SQLAlchemy
        """
        self.settings = settings
        self.engine_factory = engine_factory
        self.logger = LoggerService.get_logger("DiscoveryService")

    def discover(self) -> List[Database]:
        """
        Descubre todas las bases de datos no excluidas y sus tablas

        Returns:
            Lista de Database en el orden del servidor

        Raises:
            DatabaseConnectionError: Si no se puede conectar
            QueryError: Si falla un listado
        """
        exclusions = self.settings.effective_exclusions
        if exclusions:
            self.logger.info(f"Bases de datos excluidas: {', '.join(sorted(exclusions))}")

        names = self._list_names("SHOW DATABASES")
        databases = []

        for name in names:
            if name in exclusions:
                self.logger.info(f"Omitiendo base de datos excluida: {name}")
                continue

            tables = self._list_names("SHOW TABLES", database=name)
            self.logger.info(f"  {name}: {len(tables)} tabla(s)")
            databases.append(Database(name=name, tables=tuple(tables)))

        total = sum(len(db.tables) for db in databases)
        self.logger.info(f"Descubiertas {len(databases)} base(s) de datos, {total} tabla(s)")
        return databases

    def _list_names(self, statement: str, database: Optional[str] = None) -> List[str]:
        """Ejecuta un listado en una conexión propia y la libera al terminar"""
        target = database or "servidor"
        engine = self._create_engine(database)
        try:
            try:
                connection = engine.connect()
            except SQLAlchemyError as e:
                raise DatabaseConnectionError(
                    f"No se pudo conectar a {self.settings.server.host} ({target}): {e}"
                ) from e

            with connection:
                try:
                    rows = connection.execute(text(statement)).scalars().all()
                except SQLAlchemyError as e:
                    raise QueryError(f"Falló '{statement}' en {target}: {e}") from e

            return [str(row) for row in rows]
        finally:
            engine.dispose()

    def _create_engine(self, database: Optional[str]) -> Engine:
        server = self.settings.server
        url = URL.create(
            "mysql+pymysql",
            username=server.user,
            password=server.password or None,
            host=server.host,
            port=server.port,
            database=database,
        )
        return self.engine_factory(
            url,
            poolclass=NullPool,
            connect_args={"connect_timeout": CONNECT_TIMEOUT},
        )
