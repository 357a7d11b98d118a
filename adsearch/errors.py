from enum import Enum


class AdSearchErrorKind(str, Enum):
    INVALID_TOKEN = "invalid_token"
    INVALID_URL = "invalid_url"
    INVALID_RESPONSE = "invalid_response"


class AdSearchError(Exception):
    """Base error for failures raised by the attribution flow itself.

    Transport failures (connection errors, timeouts) are never wrapped in
    this type; callers receive the original exception.
    """

    kind: AdSearchErrorKind

    def __init__(self, kind: AdSearchErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class InvalidTokenError(AdSearchError):
    """The attribution token could not be retrieved."""

    def __init__(self, message: str = "Attribution token is unavailable") -> None:
        super().__init__(AdSearchErrorKind.INVALID_TOKEN, message)


class InvalidUrlError(AdSearchError):
    def __init__(self, message: str = "Attribution endpoint URL is invalid") -> None:
        super().__init__(AdSearchErrorKind.INVALID_URL, message)


class InvalidResponseError(AdSearchError):
    """Non-200 status or a body that does not decode into an attribution record."""

    def __init__(self, message: str = "Attribution response is invalid") -> None:
        super().__init__(AdSearchErrorKind.INVALID_RESPONSE, message)
