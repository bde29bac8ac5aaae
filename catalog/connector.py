"""
Database connection and catalog query execution module.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import unquote, urlsplit

import mysql.connector
import psycopg2

from config import CONNECT_TIMEOUT, DEFAULT_PORTS, SCHEME_DIALECTS, url_scheme
from errors import CatalogConnectionError, ConfigError, QueryError

logger = logging.getLogger(__name__)

# Exceptions raised by the registered drivers
DRIVER_ERRORS = (mysql.connector.Error, psycopg2.Error)


@dataclass(frozen=True)
class ConnectionParams:
    """Where to connect, parsed from a database URL."""

    dialect: str
    host: str
    port: int
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None


def parse_url(url: str) -> ConnectionParams:
    """
    Parse a plain or JDBC-style database URL.

    Accepts e.g. ``mysql://user:pw@host:3306/db``,
    ``jdbc:mysql://host:9030/db?useSSL=false`` or ``jdbc:kingbase8://host/db``.

    Args:
        url: Database URL

    Returns:
        ConnectionParams with the dialect implied by the scheme

    Raises:
        ConfigError: If the scheme is unsupported or the host is missing
    """
    scheme = url_scheme(url)
    if scheme not in SCHEME_DIALECTS:
        raise ConfigError(f"Unsupported database URL scheme '{scheme}' in {url!r}")

    parts = urlsplit(url[len("jdbc:"):] if url.lower().startswith("jdbc:") else url)
    if not parts.hostname:
        raise ConfigError(f"Database URL has no host: {url!r}")

    try:
        port = parts.port or DEFAULT_PORTS[scheme]
    except ValueError as e:
        raise ConfigError(f"Invalid port in database URL {url!r}") from e

    database = parts.path.lstrip("/") or None
    return ConnectionParams(
        dialect=SCHEME_DIALECTS[scheme],
        host=parts.hostname,
        port=port,
        database=unquote(database) if database else None,
        user=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password else None,
    )


def _connect_mysql(params: ConnectionParams):
    kwargs = {
        "host": params.host,
        "port": params.port,
        "user": params.user,
        "password": params.password or "",
        "connection_timeout": CONNECT_TIMEOUT,
    }
    if params.database:
        kwargs["database"] = params.database
    return mysql.connector.connect(**kwargs)


def _connect_postgres(params: ConnectionParams):
    kwargs = {
        "host": params.host,
        "port": params.port,
        "user": params.user,
        "password": params.password,
        "connect_timeout": CONNECT_TIMEOUT,
    }
    if params.database:
        kwargs["dbname"] = params.database
    return psycopg2.connect(**kwargs)


# Dialect -> driver connect function
DRIVERS: Dict[str, Callable[[ConnectionParams], Any]] = {
    "mysql": _connect_mysql,
    "postgres": _connect_postgres,
}


class DatabaseConnector:
    """Owns the single catalog connection of an export run."""

    def __init__(self, params: ConnectionParams):
        """
        Initialize the database connector.

        Args:
            params: Connection parameters, credentials included
        """
        if params.dialect not in DRIVERS:
            raise ConfigError(f"No driver registered for dialect '{params.dialect}'")
        self.params = params
        self._conn = None

    @classmethod
    def from_config(cls, config) -> "DatabaseConnector":
        """Create a connector from a validated ExportConfig."""
        params = parse_url(config.url)
        params = replace(
            params,
            dialect=config.dialect or params.dialect,
            user=config.user or params.user,
            password=config.password if config.password is not None else params.password,
        )
        return cls(params)

    @property
    def dialect(self) -> str:
        return self.params.dialect

    def connect(self) -> None:
        """Establish the connection to the database."""
        logger.info(f"Connecting to {self.dialect} database at {self.params.host}:{self.params.port}")
        try:
            self._conn = DRIVERS[self.dialect](self.params)
        except DRIVER_ERRORS as e:
            raise CatalogConnectionError(
                f"Cannot connect to {self.params.host}:{self.params.port}: {e}"
            ) from e
        logger.debug("Database connection established")

    def disconnect(self) -> None:
        """Close the database connection if it exists."""
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None
                logger.debug("Database connection closed")

    @property
    def conn(self):
        """Get the connection, creating it if necessary."""
        if self._conn is None:
            self.connect()
        return self._conn

    def __enter__(self) -> "DatabaseConnector":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute a parameterized catalog query.

        Args:
            query: SQL with ``%s`` placeholders
            params: Values bound to the placeholders

        Returns:
            List of rows keyed by lower-cased column label

        Raises:
            QueryError: If the driver rejects or fails the query
        """
        conn = self.conn
        try:
            cursor = conn.cursor()
        except DRIVER_ERRORS as e:
            raise QueryError(f"Cannot open a cursor: {e}") from e

        try:
            cursor.execute(query, tuple(params))
            columns = [desc[0].lower() for desc in cursor.description] if cursor.description else []
            rows = [dict(zip(columns, row)) for row in cursor.fetchall()]
        except DRIVER_ERRORS as e:
            raise QueryError(f"Catalog query failed: {e}") from e
        finally:
            cursor.close()

        logger.debug(f"Catalog query returned {len(rows)} rows")
        return rows
