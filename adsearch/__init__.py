from .client import (
    AttributionCallback,
    AttributionClient,
    AttributionResult,
    attribution,
    fetch_attribution,
)
from .config import VERSION, Settings
from .errors import (
    AdSearchError,
    AdSearchErrorKind,
    InvalidResponseError,
    InvalidTokenError,
    InvalidUrlError,
)
from .models import SANDBOX_ORG_ID, AttributionRecord
from .tokens import PlatformTokenSource, StaticTokenSource, TokenSource

__version__ = VERSION

__all__ = [
    "AdSearchError",
    "AdSearchErrorKind",
    "AttributionCallback",
    "AttributionClient",
    "AttributionRecord",
    "AttributionResult",
    "InvalidResponseError",
    "InvalidTokenError",
    "InvalidUrlError",
    "PlatformTokenSource",
    "SANDBOX_ORG_ID",
    "Settings",
    "StaticTokenSource",
    "TokenSource",
    "VERSION",
    "attribution",
    "fetch_attribution",
]
