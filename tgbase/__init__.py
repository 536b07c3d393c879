"""Telegram Bot API base functions.

A thin binding over the Telegram Bot HTTP API. Every method is a single
blocking GET: the request is shaped from a declarative manifest, the JSON
envelope is unwrapped and either the ``result`` or a typed ``ApiError`` is
handed back to the caller.

The package is organised as:
- Configuration loading (environment and YAML)
- Query building and escaping
- Sync and async clients with per-method wrappers
- Best-effort response logging collaborators
"""

from .api.async_client import AsyncBotClient
from .api.client import BotClient
from .config import BotApiSettings, Config
from .errors import (
    ApiRequestError,
    BotApiException,
    MalformedResponse,
    MissingParameter,
    Timeout,
    TransportError,
)
from .models import ApiError, Flag, InlineButton, InputMedia, SendOptions

__all__ = [
    "ApiError",
    "ApiRequestError",
    "AsyncBotClient",
    "BotApiException",
    "BotApiSettings",
    "BotClient",
    "Config",
    "Flag",
    "InlineButton",
    "InputMedia",
    "MalformedResponse",
    "MissingParameter",
    "SendOptions",
    "Timeout",
    "TransportError",
]
