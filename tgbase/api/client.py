"""Synchronous Bot API client.

``BaseBotClient`` holds everything that does not depend on the transport:
URL building, envelope unwrapping, best-effort response forwarding and one
wrapper per method in the manifest. ``BotClient`` performs the blocking GET
with ``requests``.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter

from ..config import BotApiSettings
from ..errors import MalformedResponse, Timeout, TransportError
from ..models import ApiError, InputMedia, ResponseEnvelope, SendOptions
from .manifest import get_spec, media_group_items, shape_params
from .query import build_url, inline_keyboard

logger = logging.getLogger(__name__)

ResponseSink = Callable[[str, str], Any]
Options = SendOptions | int | None


def _as_options(options: Options) -> SendOptions:
    if options is None:
        return SendOptions()
    if isinstance(options, SendOptions):
        return options
    return SendOptions.from_flags(options)


def create_session(settings: BotApiSettings, pool_size: int = 10) -> requests.Session:
    """Create a pooled HTTP session for Bot API calls.

    The adapter is mounted without a retry policy; failures reach the caller.

    Args:
        settings: Client settings, used for the User-Agent header.
        pool_size: Connection pool size.

    Returns:
        Configured requests session.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": settings.user_agent})
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class BaseBotClient:
    """Transport independent part of the Bot API client.

    Subclasses implement ``call``. Every wrapper returns whatever ``call``
    returns, so the same wrappers serve the sync and the async client.

    Attributes:
        settings: Endpoint, timeout and logging settings.
        response_sink: Optional collaborator receiving ``(call_site, raw_body)``.
    """

    def __init__(self, settings: BotApiSettings, response_sink: ResponseSink | None = None):
        self.settings = settings
        self.response_sink = response_sink

    def call(self, method: str, params: Mapping[str, Any] | None = None, *, call_site: str | None = None) -> Any:
        raise NotImplementedError

    def build_url(self, method: str, params: Mapping[str, Any] | None = None) -> str:
        """Build the request URL for a method.

        Args:
            method: Bot API method name.
            params: Request parameters.

        Returns:
            Full GET URL including the escaped query.
        """
        return build_url(self.settings.endpoint, method, params or {})

    def redact(self, text: str) -> str:
        """Remove the bot token from text that may end up in logs or exceptions."""
        if not self.settings.bot_token:
            return text
        return text.replace(self.settings.bot_token, "<token>")

    def unwrap(self, method: str, raw: str) -> Any:
        """Decode a response body and unwrap its envelope.

        Args:
            method: Bot API method the body belongs to.
            raw: Raw response body.

        Returns:
            The ``result`` on success, an ApiError for ``ok: false``.

        Raises:
            MalformedResponse: If the body is not a JSON envelope.
        """
        try:
            envelope = ResponseEnvelope.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedResponse(method, "response body is not a Bot API envelope", raw) from e

        if envelope.ok:
            return envelope.result

        error = ApiError.from_envelope(method, envelope)
        logger.info(f"{method} failed: [{error.error_code}] {error.description}")
        return error

    def forward_response(self, call_site: str, params: Mapping[str, Any] | None, raw: str) -> Any:
        """Hand a raw response to the logging collaborator, if enabled.

        Responses for the log channel itself are never forwarded. Errors raised
        by the collaborator are logged and dropped.

        Args:
            call_site: Name the response is reported under.
            params: Parameters of the request.
            raw: Raw response body.

        Returns:
            Whatever the collaborator returned, None if it was not called or failed.
        """
        if self.response_sink is None or not self.settings.response_logging:
            return None
        if self.settings.is_log_channel((params or {}).get("chat_id")):
            return None

        try:
            return self.response_sink(call_site, raw)
        except Exception as e:
            logger.warning(f"Response logging for {call_site} failed: {e}")
            return None

    def _log_request(self, method: str, params: Mapping[str, Any] | None) -> None:
        logger.debug(f"Calling {method} with parameters: {', '.join(params or {}) or 'none'}")

    def invoke(self, method: str, options: Options = None, *, call_site: str | None = None, **values: Any) -> Any:
        """Shape wrapper arguments with the manifest and issue the call.

        Args:
            method: Bot API method name.
            options: SendOptions, a legacy ``Flag`` bitmask, or None.
            call_site: Name used when forwarding the response, defaults to ``method``.
            **values: Parameter values keyed by Bot API parameter name.

        Returns:
            Result of ``call``.
        """
        params = shape_params(get_spec(method), values, _as_options(options))
        return self.call(method, params, call_site=call_site)

    def get_me(self) -> Any:
        """Return basic information about the bot, useful to check the token."""
        return self.invoke("getMe")

    def send_message(
        self,
        chat_id: int | str,
        text: str,
        options: Options = None,
        keyboard: list[list[Any]] | None = None,
        reply_to_message_id: int = 0,
    ) -> Any:
        """Send a text message.

        Args:
            chat_id: Target chat id or ``@username``.
            text: Message text.
            options: MARKDOWN, ENABLE_PAGE_PREVIEW and DISABLE_NOTIFICATION apply.
            keyboard: Inline keyboard layout, rows of buttons.
            reply_to_message_id: Message to reply to; 0 means none.

        Returns:
            The sent Message, or ApiError.
        """
        return self.invoke(
            "sendMessage",
            options,
            call_site="replyToMessage" if reply_to_message_id else None,
            chat_id=chat_id,
            text=text,
            reply_to_message_id=reply_to_message_id,
            reply_markup=inline_keyboard(keyboard),
        )

    def reply_to_message(
        self,
        chat_id: int | str,
        text: str,
        message_id: int,
        options: Options = None,
        keyboard: list[list[Any]] | None = None,
    ) -> Any:
        """Send a text message as a reply; see ``send_message``."""
        return self.send_message(chat_id, text, options, keyboard, reply_to_message_id=message_id)

    def edit_message_text(
        self,
        chat_id: int | str,
        message_id: int,
        text: str,
        options: Options = None,
        keyboard: list[list[Any]] | None = None,
    ) -> Any:
        """Edit the text of a sent message.

        Args:
            chat_id: Chat holding the message.
            message_id: Message to edit.
            text: New text.
            options: MARKDOWN and ENABLE_PAGE_PREVIEW apply.
            keyboard: New inline keyboard layout.

        Returns:
            The edited Message, or ApiError.
        """
        return self.invoke(
            "editMessageText",
            options,
            chat_id=chat_id,
            message_id=message_id,
            text=text,
            reply_markup=inline_keyboard(keyboard),
        )

    def edit_message_caption(
        self,
        chat_id: int | str,
        message_id: int,
        caption: str,
        options: Options = None,
        keyboard: list[list[Any]] | None = None,
    ) -> Any:
        """Edit the caption of a sent message. Only MARKDOWN applies."""
        return self.invoke(
            "editMessageCaption",
            options,
            chat_id=chat_id,
            message_id=message_id,
            caption=caption,
            reply_markup=inline_keyboard(keyboard),
        )

    def edit_message_reply_markup(
        self,
        chat_id: int | str,
        message_id: int,
        *,
        keyboard: list[list[Any]] | None = None,
    ) -> Any:
        """Replace the inline keyboard of a sent message.

        An empty layout sends no ``reply_markup``, which removes the keyboard.
        """
        return self.invoke(
            "editMessageReplyMarkup",
            chat_id=chat_id,
            message_id=message_id,
            reply_markup=inline_keyboard(keyboard),
        )

    def delete_message(self, chat_id: int | str, message_id: int) -> Any:
        return self.invoke("deleteMessage", chat_id=chat_id, message_id=message_id)

    def forward_message(
        self,
        chat_id: int | str,
        from_chat_id: int | str,
        message_id: int,
        options: Options = None,
    ) -> Any:
        """Forward a message from one chat to another. DISABLE_NOTIFICATION applies."""
        return self.invoke(
            "forwardMessage",
            options,
            chat_id=chat_id,
            from_chat_id=from_chat_id,
            message_id=message_id,
        )

    def pin_chat_message(self, chat_id: int | str, message_id: int, options: Options = None) -> Any:
        return self.invoke("pinChatMessage", options, chat_id=chat_id, message_id=message_id)

    def get_chat(self, chat_id: int | str) -> Any:
        return self.invoke("getChat", chat_id=chat_id)

    def send_photo(
        self,
        chat_id: int | str,
        photo: str,
        options: Options = None,
        caption: str = "",
        reply_to_message_id: int = 0,
        keyboard: list[list[Any]] | None = None,
    ) -> Any:
        """Send a photo by file id or URL.

        Args:
            chat_id: Target chat.
            photo: File id or HTTP URL of the photo.
            options: MARKDOWN and DISABLE_NOTIFICATION apply.
            caption: Photo caption.
            reply_to_message_id: Message to reply to; 0 means none.
            keyboard: Inline keyboard layout.

        Returns:
            The sent Message, or ApiError.
        """
        return self.invoke(
            "sendPhoto",
            options,
            chat_id=chat_id,
            photo=photo,
            caption=caption,
            reply_to_message_id=reply_to_message_id,
            reply_markup=inline_keyboard(keyboard),
        )

    def send_video(
        self,
        chat_id: int | str,
        video: str,
        duration: int = 0,
        width: int = 0,
        height: int = 0,
        thumb: str = "",
        options: Options = None,
        caption: str = "",
        reply_to_message_id: int = 0,
        keyboard: list[list[Any]] | None = None,
    ) -> Any:
        """Send a video by file id or URL.

        Zero dimensions and duration are left out of the request.

        Args:
            chat_id: Target chat.
            video: File id or HTTP URL of the video.
            duration: Duration in seconds.
            width: Video width.
            height: Video height.
            thumb: Thumbnail reference.
            options: MARKDOWN, DISABLE_NOTIFICATION and SUPPORTS_STREAMING apply.
            caption: Video caption.
            reply_to_message_id: Message to reply to; 0 means none.
            keyboard: Inline keyboard layout.

        Returns:
            The sent Message, or ApiError.
        """
        return self.invoke(
            "sendVideo",
            options,
            chat_id=chat_id,
            video=video,
            caption=caption,
            thumb=thumb,
            duration=duration,
            width=width,
            height=height,
            reply_to_message_id=reply_to_message_id,
            reply_markup=inline_keyboard(keyboard),
        )

    def send_voice(
        self,
        chat_id: int | str,
        voice: str,
        caption: str = "",
        options: Options = None,
        duration: int = 0,
        reply_to_message_id: int = 0,
        keyboard: list[list[Any]] | None = None,
    ) -> Any:
        """Send a voice note by file id or URL. MARKDOWN and DISABLE_NOTIFICATION apply."""
        return self.invoke(
            "sendVoice",
            options,
            chat_id=chat_id,
            voice=voice,
            caption=caption,
            duration=duration,
            reply_to_message_id=reply_to_message_id,
            reply_markup=inline_keyboard(keyboard),
        )

    def send_media_group(
        self,
        chat_id: int | str,
        media: Iterable[InputMedia | Mapping[str, Any]],
        options: Options = None,
        reply_to_message_id: int = 0,
    ) -> Any:
        """Send an album.

        Args:
            chat_id: Target chat.
            media: Album items.
            options: DISABLE_NOTIFICATION applies to the request, MARKDOWN to each item.
            reply_to_message_id: Message to reply to; 0 means none.

        Returns:
            List of sent Messages, or ApiError.
        """
        options = _as_options(options)
        return self.invoke(
            "sendMediaGroup",
            options,
            chat_id=chat_id,
            media=media_group_items(media, options),
            reply_to_message_id=reply_to_message_id,
        )

    def answer_callback_query(
        self,
        callback_query_id: str,
        text: str = "",
        options: Options = None,
        url: str = "",
    ) -> Any:
        """Answer a CallbackQuery. SHOW_ALERT turns the notification into an alert."""
        return self.invoke(
            "answerCallbackQuery",
            options,
            callback_query_id=callback_query_id,
            text=text,
            url=url,
        )

    def answer_inline_query(
        self,
        inline_query_id: str,
        results: list[Any],
        cache_time: int = 0,
        is_personal: bool | None = None,
        next_offset: str = "",
    ) -> Any:
        """Answer an InlineQuery with a list of InlineQueryResult objects."""
        return self.invoke(
            "answerInlineQuery",
            inline_query_id=inline_query_id,
            results=results,
            cache_time=cache_time,
            is_personal=is_personal,
            next_offset=next_offset,
        )


class BotClient(BaseBotClient):
    """Blocking Bot API client built on ``requests``.

    Safe to share between threads; it holds no per-call state.
    """

    def __init__(
        self,
        settings: BotApiSettings,
        response_sink: ResponseSink | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Endpoint, timeout and logging settings.
            response_sink: Optional collaborator receiving raw responses.
            session: Shared session; one is created (and owned) when omitted.
        """
        super().__init__(settings, response_sink)
        self._owns_session = session is None
        self.session = session if session is not None else create_session(settings)

    def __enter__(self) -> "BotClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def call(self, method: str, params: Mapping[str, Any] | None = None, *, call_site: str | None = None) -> Any:
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
        url = self.build_url(method, params)
        self._log_request(method, params)

        try:
            response = self.session.get(url, timeout=self.settings.timeout)
        except requests.Timeout as e:
            raise Timeout(method, f"no response within {self.settings.timeout}s") from e
        except requests.RequestException as e:
            raise TransportError(method, self.redact(str(e))) from e

        raw = response.text
        self.forward_response(call_site or method, params, raw)
        return self.unwrap(method, raw)
