"""
Configuration loader for the CollegeHub client

Reads settings from environment variables with an optional YAML config file
(validated against a JSON schema), builds the session store and API client,
and installs a logging filter that redacts the live bearer token.

Precedence: environment variable > config file > built-in default.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import jsonschema
import yaml

from collegehub.constants import DEFAULT_API_URL

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


SESSION_BACKENDS = ("file", "dynamodb", "memory")

DEFAULT_CONFIG_FILE = "~/.collegehub/config.yaml"

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "api_url": {"type": "string", "pattern": "^https?://"},
        "request_timeout": {"type": ["number", "null"], "exclusiveMinimum": 0},
        "session": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "backend": {"enum": list(SESSION_BACKENDS)},
                "file": {"type": "string"},
                "table": {"type": "string", "minLength": 3},
                "region": {"type": "string"},
            },
        },
    },
}

# Environment variable -> (config path, parser)
ENV_OVERRIDES: Dict[str, Any] = {
    "COLLEGEHUB_API_URL": (("api_url",), str),
    "COLLEGEHUB_REQUEST_TIMEOUT": (("request_timeout",), float),
    "COLLEGEHUB_SESSION_BACKEND": (("session", "backend"), str),
    "COLLEGEHUB_SESSION_FILE": (("session", "file"), str),
    "COLLEGEHUB_SESSION_TABLE": (("session", "table"), str),
    "COLLEGEHUB_AWS_REGION": (("session", "region"), str),
}


class SecretRedactionFilter(logging.Filter):
    """
    Logging filter that replaces the live bearer token with ***REDACTED***.

    The token is looked up on every record through a provider callable, so
    the filter follows login and logout without being reinstalled.
    """

    def __init__(self, token_provider: Optional[Callable[[], Optional[str]]] = None):
        super().__init__()
        self.token_provider = token_provider

    def filter(self, record: logging.LogRecord) -> bool:
        token = self.token_provider() if self.token_provider else None
        if not token or len(token) <= 3:
            return True
        try:
            record.msg = str(record.msg).replace(token, "***REDACTED***")
            if record.args:
                if isinstance(record.args, dict):
                    record.args = {
                        k: str(v).replace(token, "***REDACTED***") for k, v in record.args.items()
                    }
                elif isinstance(record.args, (list, tuple)):
                    record.args = tuple(
                        str(arg).replace(token, "***REDACTED***") for arg in record.args
                    )
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Error during token redaction: {e}")
        return True


class Settings:
    """
    Resolved client configuration.

    Attributes:
        api_url: Backend origin
        request_timeout: Seconds per request, or None to wait indefinitely
        session_backend: "file", "dynamodb" or "memory"
        session_file: Path of the JSON session file (file backend)
        session_table: DynamoDB table name (dynamodb backend)
        aws_region: AWS region (dynamodb backend)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        session_cfg = config.get("session", {})

        self.api_url: str = config.get("api_url", DEFAULT_API_URL).rstrip("/")
        self.request_timeout: Optional[float] = config.get("request_timeout")
        self.session_backend: str = session_cfg.get("backend", "file")
        self.session_file: Path = Path(
            os.path.expanduser(session_cfg.get("file", "~/.collegehub/session.json"))
        )
        self.session_table: str = session_cfg.get("table", "session")
        self.aws_region: Optional[str] = session_cfg.get("region")

        if self.session_backend not in SESSION_BACKENDS:
            raise ConfigurationError(
                f"Unknown session backend '{self.session_backend}'. "
                f"Expected one of: {', '.join(SESSION_BACKENDS)}"
            )

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> "Settings":
        """
        Load settings from the config file and the environment.

        Args:
            config_path: YAML file path (default: COLLEGEHUB_CONFIG_FILE or
                ~/.collegehub/config.yaml; a missing default file is ignored)
            environ: Environment mapping (default: os.environ)

        Raises:
            ConfigurationError: If the file is invalid or a value is malformed
        """
        environ = os.environ if environ is None else environ
        explicit = config_path or environ.get("COLLEGEHUB_CONFIG_FILE")
        path = Path(os.path.expanduser(explicit or DEFAULT_CONFIG_FILE))

        config: Dict[str, Any] = {}
        if path.exists():
            config = cls._load_config_file(path)
        elif explicit:
            raise ConfigurationError(f"Config file not found: {path}")

        for env_var, (config_path_keys, parser) in ENV_OVERRIDES.items():
            raw = environ.get(env_var)
            if raw is None or raw == "":
                continue
            try:
                value = parser(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {env_var}: {raw!r}") from e
            target = config
            for key in config_path_keys[:-1]:
                target = target.setdefault(key, {})
            target[config_path_keys[-1]] = value

        cls.validate(config)
        return cls(config)

    @staticmethod
    def _load_config_file(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

        if content is None:
            logger.warning(f"Empty configuration file: {path}")
            return {}
        if not isinstance(content, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        logger.debug(f"Loaded configuration from {path}")
        return content

    @staticmethod
    def validate(config: Dict[str, Any]) -> None:
        """
        Validate a raw configuration mapping against CONFIG_SCHEMA.

        Raises:
            ConfigurationError: If validation fails
        """
        try:
            jsonschema.validate(instance=config, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e.message}") from e

    def create_store(self):
        """
        Build the durable session store for the configured backend.
        """
        from collegehub.database import DynamoDBSessionStore, LocalSessionStore, MemorySessionStore

        if self.session_backend == "dynamodb":
            return DynamoDBSessionStore(table_name=self.session_table, region_name=self.aws_region)
        if self.session_backend == "memory":
            return MemorySessionStore()
        return LocalSessionStore(self.session_file)

    def create_session_context(self, http_session=None):
        """
        Wire the API client, session manager and session context together.

        Args:
            http_session: Optional requests.Session to reuse

        Returns:
            Uninitialized SessionContext; call initialize() before use
        """
        from collegehub.api import CollegeHubAPI, CollegeHubAPIClient
        from collegehub.auth import SessionContext, SessionManager

        client = CollegeHubAPIClient(
            base_url=self.api_url, session=http_session, timeout=self.request_timeout
        )
        return SessionContext(CollegeHubAPI(client), SessionManager(self.create_store()))


def setup_logging_redaction(context) -> SecretRedactionFilter:
    """
    Install token redaction on every collegehub logger and its handlers.

    Args:
        context: SessionContext whose current token should be redacted
    """
    redaction_filter = SecretRedactionFilter(context.get_token)
    names = ["", "collegehub"] + [
        name for name in logging.root.manager.loggerDict if name.startswith("collegehub.")
    ]
    for name in names:
        target = logging.getLogger(name)
        target.addFilter(redaction_filter)
        for handler in target.handlers:
            handler.addFilter(redaction_filter)
    return redaction_filter
