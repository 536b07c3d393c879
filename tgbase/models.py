"""Data models for the Bot API client.

Defines Pydantic models for request options, the JSON response envelope,
typed API failures and the structured values (buttons, media group items)
that are serialized into a query string. Results themselves are passed
through as plain JSON and are not modelled.
"""

from enum import IntFlag
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, StrictBool, model_validator

from .errors import ApiRequestError

PARSE_MODE_HTML = "HTML"
PARSE_MODE_MARKDOWN = "MarkdownV2"


class Flag(IntFlag):
    """Legacy bitmask values accepted by ``SendOptions.from_flags``."""

    NONE = 0
    MARKDOWN = 1
    ENABLE_PAGE_PREVIEW = 2
    DISABLE_NOTIFICATION = 4
    SUPPORTS_STREAMING = 8
    SHOW_ALERT = 16


class SendOptions(BaseModel):
    """Independent behaviour switches for a single request.

    Any combination is valid; each switch affects exactly one parameter and
    only on methods that declare it.

    Attributes:
        markdown: Use ``MarkdownV2`` instead of ``HTML`` as parse mode.
        enable_page_preview: Show link previews.
        disable_notification: Deliver silently.
        supports_streaming: Mark an uploaded video as streamable.
        show_alert: Show a callback answer as an alert instead of a toast.
    """

    model_config = ConfigDict(frozen=True)

    markdown: bool = False
    enable_page_preview: bool = False
    disable_notification: bool = False
    supports_streaming: bool = False
    show_alert: bool = False

    @classmethod
    def from_flags(cls, flags: int) -> "SendOptions":
        """Build options from a legacy ``Flag`` bitmask.

        Args:
            flags: Union of ``Flag`` members, e.g. ``Flag.MARKDOWN | Flag.SHOW_ALERT``.

        Returns:
            SendOptions with the matching switches turned on.
        """
        flags = Flag(flags)
        return cls(
            markdown=Flag.MARKDOWN in flags,
            enable_page_preview=Flag.ENABLE_PAGE_PREVIEW in flags,
            disable_notification=Flag.DISABLE_NOTIFICATION in flags,
            supports_streaming=Flag.SUPPORTS_STREAMING in flags,
            show_alert=Flag.SHOW_ALERT in flags,
        )

    @property
    def parse_mode(self) -> str:
        """The single parse mode these options select."""
        return PARSE_MODE_MARKDOWN if self.markdown else PARSE_MODE_HTML


class ResponseEnvelope(BaseModel):
    """Bot API response envelope.

    Attributes:
        ok: Whether the request succeeded.
        result: Method result, present only when ``ok`` is true.
        description: Human readable failure reason.
        error_code: Numeric failure code, usually the HTTP status.
        parameters: Extra failure details such as ``retry_after``.
    """

    model_config = ConfigDict(extra="allow")

    ok: StrictBool
    result: Any = None
    description: str | None = None
    error_code: int | None = None
    parameters: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _result_only_on_success(self) -> "ResponseEnvelope":
        if self.ok and "result" not in self.model_fields_set:
            raise ValueError("successful response carries no result")
        return self


class ApiError(BaseModel):
    """Typed failure value for a well-formed ``ok: false`` response.

    It is falsy, so ``if not client.get_chat(...)`` keeps working for callers
    that only care about success, while the description stays available.

    Attributes:
        method: Bot API method that failed.
        description: Failure reason reported by Telegram.
        error_code: Numeric failure code, if any.
        parameters: Extra failure details, if any.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    description: str = ""
    error_code: int | None = None
    parameters: dict[str, Any] | None = None

    def __bool__(self) -> bool:
        return False

    @classmethod
    def from_envelope(cls, method: str, envelope: ResponseEnvelope) -> "ApiError":
        return cls(
            method=method,
            description=envelope.description or "",
            error_code=envelope.error_code,
            parameters=envelope.parameters,
        )

    def raise_error(self) -> None:
        """Raise this failure as ``ApiRequestError``.

        Raises:
            ApiRequestError: Always.
        """
        raise ApiRequestError(self.method, self.description, self.error_code)


class InlineButton(BaseModel):
    """Inline keyboard button descriptor."""

    text: str
    callback_data: str | None = None
    url: str | None = None
    switch_inline_query: str | None = None
    switch_inline_query_current_chat: str | None = None


class InputMedia(BaseModel):
    """Single item of a media group.

    Attributes:
        type: Media kind.
        media: File id or URL of the media.
        caption: Optional caption.
        parse_mode: Caption parse mode; filled in from the request options when unset.
        thumb: Thumbnail reference, videos only.
        duration: Video duration in seconds.
        width: Video width.
        height: Video height.
        supports_streaming: Whether the video is streamable.
    """

    type: Literal["photo", "video", "audio", "document"]
    media: str
    caption: str | None = None
    parse_mode: str | None = None
    thumb: str | None = None
    duration: int | None = None
    width: int | None = None
    height: int | None = None
    supports_streaming: bool | None = None
