"""
Centralized settings for the schedule pricing service.

Values come from the process environment; every key has a default so the
direct-input endpoint runs with no configuration at all.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off'}


def _read_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == '':
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{key} must be a boolean, got {raw!r}")


def _read_number(env: Mapping[str, str], key: str, default, cast):
    raw = env.get(key)
    if raw is None or raw.strip() == '':
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{key} must be a {cast.__name__}, got {raw!r}") from None


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # eSuite catalog collaborator
    esuite_api_host: str = ''
    esuite_api_client: str = ''
    esuite_api_password: str = ''
    esuite_api_version: str = ''
    esuite_timeout_seconds: float = 5.0
    esuite_max_concurrency: int = 10

    # Inbound throttling on /api/*
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 5
    rate_limit_window_seconds: float = 10.0

    log_level: str = 'INFO'

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Load settings from the environment (``os.environ`` by default)."""
        env = os.environ if environ is None else environ
        defaults = cls()

        return cls(
            esuite_api_host=env.get('ESUITE_API_HOST', defaults.esuite_api_host).rstrip('/'),
            esuite_api_client=env.get('ESUITE_API_CLIENT', defaults.esuite_api_client),
            esuite_api_password=env.get('ESUITE_API_PASSWORD', defaults.esuite_api_password),
            esuite_api_version=env.get('ESUITE_API_VERSION', defaults.esuite_api_version),
            esuite_timeout_seconds=_read_number(
                env, 'ESUITE_TIMEOUT_SECONDS', defaults.esuite_timeout_seconds, float
            ),
            esuite_max_concurrency=max(
                1, _read_number(env, 'ESUITE_MAX_CONCURRENCY', defaults.esuite_max_concurrency, int)
            ),
            rate_limit_enabled=_read_bool(env, 'RATE_LIMIT_ENABLED', defaults.rate_limit_enabled),
            rate_limit_requests=_read_number(
                env, 'RATE_LIMIT_REQUESTS', defaults.rate_limit_requests, int
            ),
            rate_limit_window_seconds=_read_number(
                env, 'RATE_LIMIT_WINDOW_SECONDS', defaults.rate_limit_window_seconds, float
            ),
            log_level=env.get('LOG_LEVEL', defaults.log_level).upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
