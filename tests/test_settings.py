"""Tests for environment-driven settings."""
import pytest

from schedule_pricing.config.settings import Settings


def test_defaults_with_empty_environment():
    settings = Settings.load({})

    assert settings.esuite_api_host == ''
    assert settings.esuite_timeout_seconds == 5.0
    assert settings.esuite_max_concurrency == 10
    assert settings.rate_limit_enabled is True
    assert settings.rate_limit_requests == 5
    assert settings.rate_limit_window_seconds == 10.0
    assert settings.log_level == 'INFO'


def test_reads_environment():
    settings = Settings.load({
        'ESUITE_API_HOST': 'https://esuite.example.com/',
        'ESUITE_API_CLIENT': 'client',
        'ESUITE_API_PASSWORD': 'secret',
        'ESUITE_API_VERSION': '3',
        'ESUITE_TIMEOUT_SECONDS': '2.5',
        'ESUITE_MAX_CONCURRENCY': '4',
        'RATE_LIMIT_ENABLED': 'off',
        'RATE_LIMIT_REQUESTS': '50',
        'RATE_LIMIT_WINDOW_SECONDS': '60',
        'LOG_LEVEL': 'debug',
    })

    assert settings.esuite_api_host == 'https://esuite.example.com'
    assert settings.esuite_api_client == 'client'
    assert settings.esuite_api_password == 'secret'
    assert settings.esuite_api_version == '3'
    assert settings.esuite_timeout_seconds == 2.5
    assert settings.esuite_max_concurrency == 4
    assert settings.rate_limit_enabled is False
    assert settings.rate_limit_requests == 50
    assert settings.rate_limit_window_seconds == 60.0
    assert settings.log_level == 'DEBUG'


def test_blank_values_keep_defaults():
    settings = Settings.load({'RATE_LIMIT_ENABLED': ' ', 'ESUITE_TIMEOUT_SECONDS': ''})
    assert settings.rate_limit_enabled is True
    assert settings.esuite_timeout_seconds == 5.0


def test_concurrency_has_floor_of_one():
    assert Settings.load({'ESUITE_MAX_CONCURRENCY': '0'}).esuite_max_concurrency == 1


@pytest.mark.parametrize('key, value', [
    ('RATE_LIMIT_ENABLED', 'maybe'),
    ('RATE_LIMIT_REQUESTS', 'five'),
    ('ESUITE_TIMEOUT_SECONDS', '5s'),
])
def test_invalid_values_name_the_key(key, value):
    with pytest.raises(ValueError, match=key):
        Settings.load({key: value})
