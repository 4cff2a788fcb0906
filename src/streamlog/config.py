"""
Settings for the activity record store.

Settings are read from environment variables, after loading a ``.env`` file
from the working directory if one exists:
- STREAMLOG_BACKEND: "local" | "remote"
- STREAMLOG_API_URL: hosted indexing service root URL
- STREAMLOG_API_KEY: bearer token for the hosted service
- STREAMLOG_SITE_UUID: site the records belong to
- STREAMLOG_API_TIMEOUT: seconds per request
- STREAMLOG_DATA_DIR: directory for the local backend
- STREAMLOG_LOG_LEVEL: logging level name
"""

import os
from dataclasses import dataclass
from typing import Literal, Mapping, Optional, cast

from dotenv import load_dotenv

from .core.exceptions import ConfigurationError
from .infrastructure.api import LocalRecordAPI, RecordAPI, RemoteRecordAPI

BackendType = Literal["local", "remote"]

DEFAULT_API_URL = "https://api.wp-stream.com"
DEFAULT_TIMEOUT = 10.0
DEFAULT_DATA_DIR = "data"


@dataclass
class Settings:
    """
    Resolved configuration.

    Attributes:
        backend (BackendType): Which backing API to use
        api_url (str): Hosted service root URL
        api_key (Optional[str]): Bearer token for the hosted service
        site_uuid (Optional[str]): Site the records belong to
        api_timeout (float): Seconds per request
        data_dir (str): Directory for the local backend
        log_level (str): Logging level name
    """

    backend: BackendType = "local"
    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    site_uuid: Optional[str] = None
    api_timeout: float = DEFAULT_TIMEOUT
    data_dir: str = DEFAULT_DATA_DIR
    log_level: str = "INFO"

    def validate(self) -> None:
        """
        Check the settings are usable.

        Raises:
            ConfigurationError: If the backend is unknown, the timeout is not
                positive, or remote credentials are missing
        """
        if self.backend not in ("local", "remote"):
            raise ConfigurationError(f"Unsupported backend: {self.backend}")
        if self.api_timeout <= 0:
            raise ConfigurationError("STREAMLOG_API_TIMEOUT must be positive")
        if self.backend == "remote":
            if not self.api_key:
                raise ConfigurationError("STREAMLOG_API_KEY is required for the remote backend")
            if not self.site_uuid:
                raise ConfigurationError("STREAMLOG_SITE_UUID is required for the remote backend")


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name, "").strip()
    return value or None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env: Mapping to read instead of ``os.environ``; no ``.env`` file is
            loaded when given

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If a value is missing or invalid
    """
    if env is None:
        load_dotenv()
        env = os.environ

    timeout_value = _get(env, "STREAMLOG_API_TIMEOUT")
    try:
        timeout = float(timeout_value) if timeout_value else DEFAULT_TIMEOUT
    except ValueError:
        raise ConfigurationError(f"Invalid STREAMLOG_API_TIMEOUT: {timeout_value}")

    settings = Settings(
        backend=cast(BackendType, (_get(env, "STREAMLOG_BACKEND") or "local").lower()),
        api_url=_get(env, "STREAMLOG_API_URL") or DEFAULT_API_URL,
        api_key=_get(env, "STREAMLOG_API_KEY"),
        site_uuid=_get(env, "STREAMLOG_SITE_UUID"),
        api_timeout=timeout,
        data_dir=_get(env, "STREAMLOG_DATA_DIR") or DEFAULT_DATA_DIR,
        log_level=(_get(env, "STREAMLOG_LOG_LEVEL") or "INFO").upper(),
    )
    settings.validate()
    return settings


def create_api(settings: Settings) -> RecordAPI:
    """
    Build the backing API selected by the settings.

    Raises:
        ConfigurationError: If the settings are invalid
    """
    settings.validate()
    if settings.backend == "remote":
        return RemoteRecordAPI(
            base_url=settings.api_url,
            site_uuid=cast(str, settings.site_uuid),
            api_key=cast(str, settings.api_key),
            timeout=settings.api_timeout,
        )
    return LocalRecordAPI(settings.data_dir)
