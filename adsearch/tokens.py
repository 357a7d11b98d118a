import platform
from typing import Optional, Protocol, Tuple

# AAAttribution.attributionToken() ships with macOS 11.1 (iOS 14.3).
MIN_MACOS_VERSION: Tuple[int, int] = (11, 1)


class TokenSource(Protocol):
    def attribution_token(self) -> Optional[str]:
        ...


def _parse_version(value: str) -> Tuple[int, ...]:
    parts = []
    for piece in value.split("."):
        if not piece.isdigit():
            break
        parts.append(int(piece))
    return tuple(parts)


class PlatformTokenSource:
    """Token source backed by the AdServices framework on Apple platforms.

    Returns ``None`` on any platform that does not provide the framework,
    on macOS releases older than 11.1, and when the framework reports an
    error while minting the token.
    """

    def __init__(self, min_version: Tuple[int, int] = MIN_MACOS_VERSION):
        self.min_version = min_version

    def is_supported(self) -> bool:
        release = platform.mac_ver()[0]
        if not release:
            return False
        return _parse_version(release) >= self.min_version

    def attribution_token(self) -> Optional[str]:
        if not self.is_supported():
            return None
        try:
            from AdServices import AAAttribution
        except ImportError:
            return None

        try:
            token, error = AAAttribution.attributionTokenWithError_(None)
        except Exception:
            # objc.error and bridged NSExceptions both mean "no token".
            return None
        if error is not None or not token:
            return None
        return str(token)


class StaticTokenSource:
    """Token source wrapping a token obtained elsewhere (e.g. sent by a device)."""

    def __init__(self, token: Optional[str]):
        self.token = token

    def attribution_token(self) -> Optional[str]:
        if self.token is None or not self.token.strip():
            return None
        return self.token
