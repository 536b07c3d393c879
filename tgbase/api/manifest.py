"""Declarative manifest of the supported Bot API methods.

Each entry names the method's required and optional parameters and the
request options it honours. ``shape_params`` turns wrapper arguments into
the ordered parameter mapping that the client sends, applying the option to
parameter table below.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..errors import MissingParameter
from ..models import PARSE_MODE_HTML, PARSE_MODE_MARKDOWN, InputMedia, SendOptions
from .query import is_empty

# option name -> (parameter, value when off, value when on)
FLAG_PARAMETERS: dict[str, tuple[str, Any, Any]] = {
    "markdown": ("parse_mode", PARSE_MODE_HTML, PARSE_MODE_MARKDOWN),
    "enable_page_preview": ("disable_web_page_preview", True, False),
    "disable_notification": ("disable_notification", False, True),
    "supports_streaming": ("supports_streaming", False, True),
    "show_alert": ("show_alert", False, True),
}


class MethodSpec(BaseModel):
    """Parameter layout of one Bot API method.

    Attributes:
        name: Bot API method name.
        required: Parameters that must be supplied.
        optional: Parameters sent only when non-empty.
        flags: ``SendOptions`` fields the method honours.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()
    flags: tuple[str, ...] = ()

    @property
    def parameters(self) -> tuple[str, ...]:
        return self.required + self.optional


def _spec(name: str, required: Iterable[str] = (), optional: Iterable[str] = (), flags: Iterable[str] = ()) -> MethodSpec:
    return MethodSpec(name=name, required=tuple(required), optional=tuple(optional), flags=tuple(flags))


METHODS: dict[str, MethodSpec] = {
    spec.name: spec
    for spec in (
        _spec("getMe"),
        _spec(
            "sendMessage",
            required=("chat_id", "text"),
            optional=("reply_to_message_id", "reply_markup"),
            flags=("markdown", "enable_page_preview", "disable_notification"),
        ),
        _spec(
            "editMessageText",
            required=("chat_id", "message_id", "text"),
            optional=("reply_markup",),
            flags=("markdown", "enable_page_preview"),
        ),
        _spec(
            "editMessageCaption",
            required=("chat_id", "message_id", "caption"),
            optional=("reply_markup",),
            flags=("markdown",),
        ),
        _spec("editMessageReplyMarkup", required=("chat_id", "message_id"), optional=("reply_markup",)),
        _spec("deleteMessage", required=("chat_id", "message_id")),
        _spec(
            "forwardMessage",
            required=("chat_id", "from_chat_id", "message_id"),
            flags=("disable_notification",),
        ),
        _spec("pinChatMessage", required=("chat_id", "message_id"), flags=("disable_notification",)),
        _spec("getChat", required=("chat_id",)),
        _spec(
            "sendPhoto",
            required=("chat_id", "photo"),
            optional=("caption", "reply_to_message_id", "reply_markup"),
            flags=("markdown", "disable_notification"),
        ),
        _spec(
            "sendVideo",
            required=("chat_id", "video"),
            optional=(
                "caption",
                "thumb",
                "duration",
                "width",
                "height",
                "reply_to_message_id",
                "reply_markup",
            ),
            flags=("markdown", "supports_streaming", "disable_notification"),
        ),
        _spec(
            "sendVoice",
            required=("chat_id", "voice"),
            optional=("caption", "duration", "reply_to_message_id", "reply_markup"),
            flags=("markdown", "disable_notification"),
        ),
        # MARKDOWN applies to the items, see media_group_items()
        _spec(
            "sendMediaGroup",
            required=("chat_id", "media"),
            optional=("reply_to_message_id",),
            flags=("disable_notification",),
        ),
        _spec(
            "answerCallbackQuery",
            required=("callback_query_id",),
            optional=("text", "url"),
            flags=("show_alert",),
        ),
        _spec(
            "answerInlineQuery",
            required=("inline_query_id", "results"),
            optional=("cache_time", "is_personal", "next_offset"),
        ),
    )
}


def get_spec(method: str) -> MethodSpec:
    """Look up a method in the manifest.

    Args:
        method: Bot API method name.

    Returns:
        The method's MethodSpec.

    Raises:
        KeyError: If the method is not part of the manifest.
    """
    try:
        return METHODS[method]
    except KeyError:
        raise KeyError(f"Bot API method '{method}' is not in the manifest") from None


def flag_parameters(spec: MethodSpec, options: SendOptions) -> dict[str, Any]:
    """Map request options onto the parameters a method declares.

    Args:
        spec: Method layout.
        options: Request options.

    Returns:
        Parameter name to value for every flag the method honours.
    """
    params = {}
    for flag in spec.flags:
        parameter, off, on = FLAG_PARAMETERS[flag]
        params[parameter] = on if getattr(options, flag) else off
    return params


def shape_params(spec: MethodSpec, values: Mapping[str, Any], options: SendOptions | None = None) -> dict[str, Any]:
    """Build the ordered parameter mapping for a request.

    Required parameters come first, then flag parameters, then optional ones.

    Args:
        spec: Method layout.
        values: Wrapper arguments keyed by parameter name.
        options: Request options, defaults to all switches off.

    Returns:
        Ordered parameter mapping ready for ``build_query``.

    Raises:
        MissingParameter: If a required parameter is None or an empty string.
        TypeError: If ``values`` holds a parameter the method does not declare.
    """
    unknown = set(values) - set(spec.parameters)
    if unknown:
        raise TypeError(f"{spec.name} got unexpected parameters: {', '.join(sorted(unknown))}")

    params: dict[str, Any] = {}
    for name in spec.required:
        value = values.get(name)
        if is_empty(value):
            raise MissingParameter(spec.name, name)
        params[name] = value

    params.update(flag_parameters(spec, options or SendOptions()))

    for name in spec.optional:
        if name in values:
            params[name] = values[name]

    return params


def media_group_items(media: Iterable[InputMedia | Mapping[str, Any]], options: SendOptions) -> list[dict[str, Any]]:
    """Prepare media group items for serialization.

    Each item gets ``HTML`` as parse mode when it has none; MARKDOWN upgrades
    items that did not choose a parse mode themselves.

    Args:
        media: Items as InputMedia models or plain mappings.
        options: Request options.

    Returns:
        Plain dictionaries, the caller's items left untouched.
    """
    items = []
    for entry in media:
        if isinstance(entry, InputMedia):
            item = entry.model_dump(exclude_none=True)
        else:
            item = dict(entry)
        if not item.get("parse_mode"):
            item["parse_mode"] = options.parse_mode
        items.append(item)
    return items
