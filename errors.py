"""
Error kinds raised by the schema document exporter.

Each kind carries the process exit code the CLI reports for it.
"""


class ExportError(Exception):
    """Base class for all export failures."""

    exit_code = 1


class ConfigError(ExportError):
    """Missing or invalid configuration (URL, schema, dialect)."""

    exit_code = 1


class CatalogConnectionError(ExportError):
    """The database could not be reached or refused the credentials."""

    exit_code = 2


class WriteError(ExportError):
    """The output document or data dictionary could not be written."""

    exit_code = 3


class QueryError(ExportError):
    """A catalog query failed (bad SQL, missing privileges, ...)."""

    exit_code = 4
