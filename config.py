"""
Configuration settings for the schema document exporter.
"""
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional, Tuple
from urllib.parse import urlsplit

from dotenv import dotenv_values

from errors import ConfigError

# Environment variable prefix for every recognized option
ENV_PREFIX = "DBDOC_"

# URL scheme -> catalog dialect
SCHEME_DIALECTS = {
    "mysql": "mysql",
    "mariadb": "mysql",
    "doris": "mysql",
    "postgres": "postgres",
    "postgresql": "postgres",
    "kingbase": "postgres",
    "kingbase8": "postgres",
}
DIALECTS = ("mysql", "postgres")

# Default ports per URL scheme
DEFAULT_PORTS = {
    "mysql": 3306,
    "mariadb": 3306,
    "doris": 9030,
    "postgres": 5432,
    "postgresql": 5432,
    "kingbase": 54321,
    "kingbase8": 54321,
}

DEFAULT_OUTPUT = "output.docx"
DEFAULT_COMMENT_DELIMITER = "|"

# Connection timeout passed to the drivers (seconds)
CONNECT_TIMEOUT = 10


def url_scheme(url: str) -> str:
    """Return the lower-cased scheme of a plain or ``jdbc:`` prefixed URL."""
    if url.lower().startswith("jdbc:"):
        url = url[len("jdbc:"):]
    return urlsplit(url).scheme.lower()


@dataclass(frozen=True)
class ExportConfig:
    """Recognized options for one export run."""

    url: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    schema: Optional[str] = None
    output: str = DEFAULT_OUTPUT
    dialect: Optional[str] = None
    csv_output: Optional[str] = None
    comment_delimiter: str = DEFAULT_COMMENT_DELIMITER

    def resolved_dialect(self) -> str:
        """The explicit dialect, or the one implied by the URL scheme."""
        if self.dialect:
            dialect = self.dialect.lower()
            if dialect in SCHEME_DIALECTS:
                return SCHEME_DIALECTS[dialect]
            raise ConfigError(f"Unknown dialect '{self.dialect}' (expected one of: {', '.join(DIALECTS)})")

        scheme = url_scheme(self.url or "")
        if scheme not in SCHEME_DIALECTS:
            raise ConfigError(f"Cannot infer dialect from URL scheme '{scheme}'; set --dialect")
        return SCHEME_DIALECTS[scheme]

    def validate(self) -> "ExportConfig":
        """
        Check that the options are complete enough to run an export.

        Returns:
            A copy with the dialect resolved

        Raises:
            ConfigError: If url or schema is missing or the dialect is unknown
        """
        missing = [name for name in ("url", "schema") if not getattr(self, name)]
        if missing:
            env_names = ", ".join(ENV_PREFIX + name.upper() for name in missing)
            raise ConfigError(f"Missing required option(s): {', '.join(missing)} (set {env_names} or pass them as arguments)")
        if not self.output:
            raise ConfigError("Output path must not be empty")
        if not self.comment_delimiter:
            raise ConfigError("Comment delimiter must not be empty")
        return replace(self, dialect=self.resolved_dialect())


# Option name -> environment variable
ENV_VARS = {
    "url": "DBDOC_URL",
    "user": "DBDOC_USER",
    "password": "DBDOC_PASSWORD",
    "schema": "DBDOC_SCHEMA",
    "output": "DBDOC_OUTPUT",
    "dialect": "DBDOC_DIALECT",
    "csv_output": "DBDOC_CSV",
    "comment_delimiter": "DBDOC_COMMENT_DELIMITER",
}


def _read_env_file(env_file: Optional[Path]) -> Dict[str, Optional[str]]:
    if env_file is None:
        default = Path(".env")
        return dotenv_values(default) if default.is_file() else {}
    if not Path(env_file).is_file():
        raise ConfigError(f"Config file not found: {env_file}")
    return dotenv_values(env_file)


def describe_config(env_file: Optional[Path] = None, **overrides) -> Dict[str, Tuple[Optional[str], str]]:
    """
    Resolve every option and remember where its value came from.

    Precedence: explicit overrides, then environment variables, then the
    ``.env`` file, then built-in defaults.

    Args:
        env_file: Optional dotenv file; ``./.env`` is used when present
        **overrides: Option values given on the command line (None = unset)

    Returns:
        Mapping of option name to (value, source)
    """
    file_values = _read_env_file(env_file)
    defaults = ExportConfig()

    resolved = {}
    for field in fields(ExportConfig):
        name = field.name
        env_name = ENV_VARS[name]
        if overrides.get(name) is not None:
            resolved[name] = (str(overrides[name]), "argument")
        elif os.environ.get(env_name):
            resolved[name] = (os.environ[env_name], "environment")
        elif file_values.get(env_name):
            resolved[name] = (file_values[env_name], "config file")
        else:
            resolved[name] = (getattr(defaults, name), "default")
    return resolved


def load_config(env_file: Optional[Path] = None, **overrides) -> ExportConfig:
    """
    Build the export configuration without validating it.

    Args:
        env_file: Optional dotenv file; ``./.env`` is used when present
        **overrides: Option values given on the command line (None = unset)

    Returns:
        ExportConfig with every recognized option resolved
    """
    resolved = describe_config(env_file, **overrides)
    return ExportConfig(**{name: value for name, (value, _) in resolved.items()})
