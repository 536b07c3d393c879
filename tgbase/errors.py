"""Exceptions raised by the Bot API client.

Transport and decoding failures are raised. A well-formed ``ok: false``
response is not an exception: it comes back as an ``ApiError`` value, and
``ApiRequestError`` exists only for callers that convert it explicitly.
"""


class BotApiException(Exception):
    """Base class for all client errors."""

    def __init__(self, method: str, message: str):
        self.method = method
        super().__init__(f"{method}: {message}")


class TransportError(BotApiException):
    """Network or connection failure; not retried."""


class Timeout(BotApiException):
    """The request exceeded the configured deadline."""


class MalformedResponse(BotApiException):
    """Response body is not a JSON Bot API envelope."""

    def __init__(self, method: str, message: str, body: str = ""):
        self.body = body
        super().__init__(method, message)


class MissingParameter(BotApiException):
    """A required parameter was not supplied to a wrapper."""

    def __init__(self, method: str, parameter: str):
        self.parameter = parameter
        super().__init__(method, f"missing required parameter '{parameter}'")


class ApiRequestError(BotApiException):
    """Raised by ``ApiError.raise_error`` for callers that prefer exceptions."""

    def __init__(self, method: str, description: str, error_code: int | None = None):
        self.description = description
        self.error_code = error_code
        super().__init__(method, f"[{error_code}] {description}")
