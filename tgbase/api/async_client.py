"""Asynchronous Bot API client.

Same wrappers and the same request shaping as ``BotClient``; the GET is
performed with ``aiohttp`` so that callers running inside an event loop do
not block it. Awaitable responses from the logging collaborator are scheduled
as background tasks and never awaited by the request itself.
"""

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp
from yarl import URL

from ..config import BotApiSettings
from ..errors import MalformedResponse, Timeout, TransportError
from .client import BaseBotClient, ResponseSink

logger = logging.getLogger(__name__)


class AsyncBotClient(BaseBotClient):
    """Bot API client for asyncio applications.

    Every wrapper returns a coroutine.
    """

    def __init__(
        self,
        settings: BotApiSettings,
        response_sink: ResponseSink | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Endpoint, timeout and logging settings.
            response_sink: Optional collaborator; may be sync or async.
            session: Shared session; one is created lazily (and owned) when omitted.
        """
        super().__init__(settings, response_sink)
        self._session = session
        self._owns_session = session is None
        self._pending: set[asyncio.Future] = set()

    async def __aenter__(self) -> "AsyncBotClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(headers={"User-Agent": self.settings.user_agent})
        return self._session

    async def close(self) -> None:
        """Wait for pending response forwarding, then close an owned session and the sink."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

        close_sink = getattr(self.response_sink, "close", None)
        if close_sink is not None:
            outcome = close_sink()
            if inspect.isawaitable(outcome):
                await outcome

    def _forward_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Response logging failed: {error}")

    def _schedule_forward(self, call_site: str, params: Mapping[str, Any] | None, raw: str) -> None:
        outcome = self.forward_response(call_site, params, raw)
        if inspect.isawaitable(outcome):
            task = asyncio.ensure_future(outcome)
            self._pending.add(task)
            task.add_done_callback(self._forward_done)

    async def call(self, method: str, params: Mapping[str, Any] | None = None, *, call_site: str | None = None) -> Any:
        """Issue one Bot API request.

        Args:
            method: Bot API method name.
            params: Ordered parameter mapping; empty values are dropped.
            call_site: Name used when forwarding the response, defaults to ``method``.

        Returns:
            The unwrapped ``result``, or ApiError for ``ok: false``.

        Raises:
            Timeout: If no response arrived within ``settings.timeout``.
            TransportError: On connection failures.
            MalformedResponse: If the body is not a JSON envelope.
        """
        # the query is already percent-encoded; keep yarl from re-quoting it
        url = URL(self.build_url(method, params), encoded=True)
        self._log_request(method, params)

        session = self._get_session()
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout)
        try:
            async with session.get(url, timeout=timeout) as response:
                raw = await response.text()
        except asyncio.TimeoutError as e:
            raise Timeout(method, f"no response within {self.settings.timeout}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(method, self.redact(str(e))) from e
        except UnicodeDecodeError as e:
            raise MalformedResponse(method, "response body is not valid UTF-8") from e

        self._schedule_forward(call_site or method, params, raw)
        return self.unwrap(method, raw)
