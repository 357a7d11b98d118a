import asyncio
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Union

import aiohttp
from pydantic import ValidationError
from yarl import URL

from .config import Settings, settings as default_settings
from .errors import InvalidResponseError, InvalidTokenError, InvalidUrlError
from .models import AttributionRecord
from .tokens import PlatformTokenSource, TokenSource

CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class AttributionResult:
    """Outcome of one attribution fetch: exactly one of ``value`` or ``error``."""

    value: Optional[AttributionRecord] = None
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("AttributionResult needs exactly one of value or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> AttributionRecord:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def from_task(cls, task: "asyncio.Task[AttributionRecord]") -> "AttributionResult":
        if task.cancelled():
            return cls(error=asyncio.CancelledError())
        error = task.exception()
        if error is not None:
            return cls(error=error)
        return cls(value=task.result())


AttributionCallback = Callable[[AttributionResult], None]


class AttributionClient:
    """Posts an attribution token to the AdServices API and decodes the reply.

    Every call fetches its own token and issues its own request; nothing is
    cached or retried. A caller-provided ``session`` is reused and left open,
    otherwise a session is opened and closed per call.
    """

    def __init__(
        self,
        token_source: Optional[TokenSource] = None,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.token_source = token_source or PlatformTokenSource()
        self.settings = settings or default_settings
        self.session = session

    async def attribution(self) -> AttributionRecord:
        return await self._fetch(self.session)

    def fetch_attribution(
        self, callback: AttributionCallback
    ) -> Union["asyncio.Task[AttributionRecord]", threading.Thread]:
        """Start a fetch without blocking and report it through ``callback``.

        Inside a running event loop the request runs as a task on that loop
        and the callback fires on the loop thread. Without one, it runs on a
        daemon thread with its own loop and a session opened for that call;
        an injected session is bound to another loop and is not used there.
        The callback fires exactly once either way.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            thread = threading.Thread(
                target=self._run_in_thread,
                args=(callback,),
                name="adsearch-attribution",
                daemon=True,
            )
            thread.start()
            return thread

        task = loop.create_task(self.attribution())
        task.add_done_callback(lambda done: callback(AttributionResult.from_task(done)))
        return task

    def _run_in_thread(self, callback: AttributionCallback) -> None:
        callback(asyncio.run(self._settle()))

    async def _settle(self) -> AttributionResult:
        try:
            record = await self._fetch(None)
        except Exception as exc:
            return AttributionResult(error=exc)
        return AttributionResult(value=record)

    async def _fetch(self, session: Optional[aiohttp.ClientSession]) -> AttributionRecord:
        token = self.token_source.attribution_token()
        if token is None:
            raise InvalidTokenError()

        url = self._endpoint()
        if session is not None:
            return await self._post(session, url, token)
        async with aiohttp.ClientSession() as owned:
            return await self._post(owned, url, token)

    def _endpoint(self) -> URL:
        try:
            url = URL(self.settings.endpoint_url)
        except (TypeError, ValueError) as exc:
            raise InvalidUrlError() from exc
        if not url.is_absolute() or url.scheme not in ("http", "https") or not url.host:
            raise InvalidUrlError()
        return url

    async def _post(
        self, session: aiohttp.ClientSession, url: URL, token: str
    ) -> AttributionRecord:
        headers = {
            "Content-Type": CONTENT_TYPE,
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
            "User-Agent": self.settings.user_agent,
        }
        timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout_seconds)

        async with session.post(
            url,
            data=token.encode("utf-8"),
            headers=headers,
            timeout=timeout,
        ) as response:
            if response.status != 200:
                raise InvalidResponseError()
            body = await response.read()

        try:
            return AttributionRecord.model_validate_json(body)
        except ValidationError:
            # The raw body is not surfaced, not even as __cause__.
            raise InvalidResponseError() from None


async def attribution(token_source: Optional[TokenSource] = None) -> AttributionRecord:
    return await AttributionClient(token_source).attribution()


def fetch_attribution(
    callback: AttributionCallback, token_source: Optional[TokenSource] = None
) -> Union["asyncio.Task[AttributionRecord]", threading.Thread]:
    return AttributionClient(token_source).fetch_attribution(callback)
