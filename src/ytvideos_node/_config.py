from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Final, Mapping

import dotenv
import requests

from ._client import DEFAULT_BASE_URL, MetadataClient
from ._errors import ConfigurationError

__all__ = [
    "Settings",
    "api_key_session",
    "client_from_settings",
]

logger = logging.getLogger(__name__)

ENV_API_KEY: Final[str] = "YOUTUBE_API_KEY"
ENV_BASE_URL: Final[str] = "YTVIDEOS_BASE_URL"
ENV_TIMEOUT: Final[str] = "YTVIDEOS_TIMEOUT"
ENV_LOG_LEVEL: Final[str] = "YTVIDEOS_LOG_LEVEL"

_LOG_LEVELS: Final[set[str]] = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the node and the CLI.

    Attributes:
        api_key (str | None): YouTube Data API key.
        base_url (str): API root.
        timeout (float): Per-request timeout in seconds.
        log_level (str): Level name handed to :mod:`logging`.
    """

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 60.0
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, *, dotenv_path: str | None = None) -> "Settings":
        """Read settings from *environ* (default: ``os.environ`` after loading ``.env``)."""
        if environ is None:
            # existing environment variables win over the .env file
            dotenv.load_dotenv(dotenv_path or dotenv.find_dotenv(usecwd=True), override=False)
            environ = os.environ

        raw_timeout = environ.get(ENV_TIMEOUT, "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else cls.timeout
        except ValueError as exc:
            raise ConfigurationError(f"{ENV_TIMEOUT}={raw_timeout!r} is not a number") from exc
        if timeout <= 0:
            raise ConfigurationError(f"{ENV_TIMEOUT} must be positive, got {timeout}")

        log_level = (environ.get(ENV_LOG_LEVEL) or cls.log_level).strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigurationError(f"{ENV_LOG_LEVEL}={log_level!r} is not one of {sorted(_LOG_LEVELS)}")

        return cls(
            api_key=(environ.get(ENV_API_KEY) or "").strip() or None,
            base_url=(environ.get(ENV_BASE_URL) or "").strip() or DEFAULT_BASE_URL,
            timeout=timeout,
            log_level=log_level,
        )


def api_key_session(api_key: str) -> requests.Session:
    """Return a :class:`requests.Session` that sends *api_key* with every call.

    No retry adapter is mounted; a failed call surfaces immediately.
    """
    if not api_key:
        raise ConfigurationError("An API key is required")
    session = requests.Session()
    session.params = {"key": api_key}
    session.headers.update({"Accept": "application/json"})
    return session


def client_from_settings(settings: Settings) -> MetadataClient:
    """Build the default :class:`MetadataClient` for one node run."""
    if not settings.api_key:
        raise ConfigurationError(f"Set {ENV_API_KEY} (environment or .env) to query the YouTube Data API")
    logger.debug("creating metadata client for %s", settings.base_url)
    return MetadataClient(api_key_session(settings.api_key), settings.base_url, timeout=settings.timeout)
