"""Global test configuration and fixtures.

Provides shared fixtures for all test levels: an isolated environment,
client settings, and mocked ``requests`` / ``aiohttp`` sessions that record
the URL each request was sent to.
"""

import json
from unittest.mock import AsyncMock, MagicMock, Mock
from urllib.parse import unquote

import aiohttp
import pytest
import requests

from tgbase.config import BotApiSettings

# Test constants
TEST_BOT_TOKEN = "123456:TEST-token"
TEST_LOG_CHANNEL = "-100500"

CONFIG_ENV_VARS = (
    "BOT_TOKEN",
    "BOT_API_BASE_URL",
    "BOT_API_TIMEOUT",
    "BOT_API_USER_AGENT",
    "LOG_LVL",
    "LOG_THRESHOLD",
    "LOG_CHANNEL",
)


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Start every test from a known environment."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BOT_TOKEN", TEST_BOT_TOKEN)


@pytest.fixture
def settings():
    """Settings with response logging disabled."""
    return BotApiSettings(bot_token=TEST_BOT_TOKEN)


@pytest.fixture
def verbose_settings():
    """Settings with response logging enabled and a log channel."""
    return BotApiSettings(bot_token=TEST_BOT_TOKEN, log_level=4, log_channel=TEST_LOG_CHANNEL)


def _make_response(payload=None, text=None, status=200):
    response = Mock(spec=requests.Response)
    response.status_code = status
    response.text = text if text is not None else json.dumps(payload)
    return response


@pytest.fixture
def make_response():
    """Factory for fake ``requests.Response`` objects with a JSON or raw body."""
    return _make_response


@pytest.fixture
def mock_session():
    """Mock requests.Session answering every GET with ``{"ok": true, "result": true}``."""
    session = Mock(spec=requests.Session)
    session.get.return_value = _make_response({"ok": True, "result": True})
    return session


@pytest.fixture
def mock_http_session():
    """Mock aiohttp.ClientSession answering every GET with ``{"ok": true, "result": true}``."""
    session = AsyncMock(spec=aiohttp.ClientSession)
    session.get = MagicMock()

    response = AsyncMock()
    response.status = 200
    response.text = AsyncMock(return_value=json.dumps({"ok": True, "result": True}))

    session.get.return_value.__aenter__.return_value = response
    session.response = response
    return session


def _sent_url(session) -> str:
    return str(session.get.call_args.args[0])


def _sent_query(session) -> str:
    url = _sent_url(session)
    return url.split("?", 1)[1] if "?" in url else ""


def _sent_params(session) -> dict[str, str]:
    params = {}
    query = _sent_query(session)
    if not query:
        return params
    for pair in query.split("&"):
        name, _, value = pair.partition("=")
        params[name] = unquote(value)
    return params


@pytest.fixture
def sent_url():
    """URL of the last GET issued through a mocked session."""
    return _sent_url


@pytest.fixture
def sent_query():
    """Raw (still escaped) query string of the last GET."""
    return _sent_query


@pytest.fixture
def sent_params():
    """Decoded parameters of the last GET, in the order they were sent."""
    return _sent_params
