"""Response logging collaborators.

A client forwards ``(call_site, raw_response)`` to its response sink when the
configured verbosity is high enough. Two sinks are provided: one writes to
the standard logging tree, the other posts the response to a Telegram log
channel the way the legacy ``sendLog`` helper did.
"""

import html
import logging
from typing import Any

from ..models import ApiError

logger = logging.getLogger(__name__)

# Telegram rejects messages longer than 4096 characters.
MAX_LOGGED_RESPONSE = 3500


def format_log_message(call_site: str, raw_response: str) -> str:
    """Render a raw response as an HTML message for the log channel.

    Args:
        call_site: Wrapper or method the response belongs to.
        raw_response: Raw response body.

    Returns:
        HTML text with the call site in bold and the body preformatted.
    """
    body = raw_response
    if len(body) > MAX_LOGGED_RESPONSE:
        body = body[:MAX_LOGGED_RESPONSE] + "..."
    return f"<b>{html.escape(call_site)}</b>\n<pre>{html.escape(body)}</pre>"


class LoggerSink:
    """Write raw responses to a ``logging`` logger."""

    def __init__(self, logger_name: str = "tgbase.responses", level: int = logging.DEBUG):
        self.logger = logging.getLogger(logger_name)
        self.level = level

    def __call__(self, call_site: str, raw_response: str) -> None:
        self.logger.log(self.level, "%s: %s", call_site, raw_response)


class LogChannelForwarder:
    """Post raw responses to the configured Telegram log channel.

    The wrapped client must not have this forwarder as its own sink; clients
    skip forwarding for requests addressed to the log channel, which keeps the
    forwarder's own messages out of the log either way.
    """

    def __init__(self, client: Any):
        """Initialize forwarder.

        Args:
            client: BotClient used to post the messages.
        """
        self.client = client

    def __call__(self, call_site: str, raw_response: str) -> None:
        channel = self.client.settings.log_channel
        if not channel:
            logger.warning("Log channel is not configured; skipping response forwarding")
            return

        result = self.client.send_message(channel, format_log_message(call_site, raw_response))
        if isinstance(result, ApiError):
            logger.warning(f"Log channel rejected response of {call_site}: {result.description}")


class AsyncLogChannelForwarder(LogChannelForwarder):
    """``LogChannelForwarder`` for an AsyncBotClient; the client schedules it in the background."""

    async def __call__(self, call_site: str, raw_response: str) -> None:
        channel = self.client.settings.log_channel
        if not channel:
            logger.warning("Log channel is not configured; skipping response forwarding")
            return

        result = await self.client.send_message(channel, format_log_message(call_site, raw_response))
        if isinstance(result, ApiError):
            logger.warning(f"Log channel rejected response of {call_site}: {result.description}")

    async def close(self) -> None:
        """Close the posting client and its session."""
        await self.client.close()
