"""Query string construction for Bot API GET requests.

Every request is a single GET, so every parameter ends up in the query
string. This module decides which parameters are sent at all, how each value
is turned into text and how that text is escaped.
"""

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel

# Parameters that carry user supplied text or media references.
TEXT_FIELDS = frozenset({"text", "caption", "media", "thumb", "photo", "video", "voice", "url"})

# Legacy substitution table; it takes precedence over plain percent-encoding.
LEGACY_ESCAPES = {
    "\n": "%0A%0D",
    " ": "%20",
    "#": "%23",
    "'": "%27",
}


def is_empty(value: Any) -> bool:
    """Check if a parameter value counts as absent.

    Empty string, numeric zero, None and empty containers are absent.
    ``False`` is a real value and is never absent.

    Args:
        value: Parameter value.

    Returns:
        True if the parameter must be left out of the query.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict)):
        return len(value) == 0
    return False


def _encode_model(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_value(value: Any) -> str:
    """Turn a parameter value into its unescaped text form.

    Args:
        value: Scalar, model or JSON-compatible structure.

    Returns:
        ``true``/``false`` for booleans, compact JSON for structures, ``str()`` otherwise.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, BaseModel):
        value = _encode_model(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=_encode_model)
    return str(value)


def escape_text(text: str) -> str:
    """Percent-encode free text using the legacy table where it applies.

    Args:
        text: Raw text.

    Returns:
        Text safe to embed in a query string.
    """
    return "".join(LEGACY_ESCAPES.get(ch) or quote(ch, safe="") for ch in text)


def escape_value(name: str, text: str) -> str:
    """Escape a serialized value for the parameter it belongs to.

    Args:
        name: Parameter name.
        text: Serialized value.

    Returns:
        Percent-encoded value.
    """
    if name in TEXT_FIELDS and "\n" in text:
        return escape_text(text)
    return quote(text, safe="")


def inline_keyboard(layout: Any) -> dict[str, Any] | None:
    """Wrap a keyboard layout for the ``reply_markup`` parameter.

    Args:
        layout: Rows of button descriptors.

    Returns:
        ``{"inline_keyboard": layout}``, or None for an empty layout.
    """
    if is_empty(layout):
        return None
    return {"inline_keyboard": layout}


def build_query(params: Mapping[str, Any]) -> str:
    """Build the query string for a request.

    Args:
        params: Ordered mapping of parameter name to value.

    Returns:
        ``name=value`` pairs joined by ``&``, in mapping order, empty values left out.
    """
    pairs = []
    for name, value in params.items():
        if is_empty(value):
            continue
        pairs.append(f"{name}={escape_value(name, serialize_value(value))}")
    return "&".join(pairs)


def build_url(endpoint: str, method: str, params: Mapping[str, Any]) -> str:
    """Build the full request URL.

    Args:
        endpoint: Token-scoped endpoint, ``<base_url>/bot<token>``.
        method: Bot API method name.
        params: Request parameters.

    Returns:
        ``<endpoint>/<method>`` with the query appended when there is one.
    """
    url = f"{endpoint}/{method}"
    query = build_query(params)
    if query:
        url += f"?{query}"
    return url
