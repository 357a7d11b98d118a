import asyncio
from typing import List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from adsearch.client import AttributionClient, AttributionResult
from adsearch.config import Settings

SANDBOX_BODY = (
    '{"attribution":true,"orgId":1234567890,"campaignId":542370539,'
    '"conversionType":"Download","clickDate":"2020-04-08T17:17Z","claimType":"Click",'
    '"adGroupId":542317095,"countryOrRegion":"US","keywordId":87675432,"adId":542317136}'
)


class RecordedRequest:
    def __init__(self, method: str, path: str, headers: dict, body: bytes):
        self.method = method
        self.path = path
        self.headers = headers
        self.body = body


class FakeAttributionServer:
    """Local stand-in for the attribution API that records what it receives."""

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.status = 200
        self.body = SANDBOX_BODY
        self.delay = 0.0
        app = web.Application()
        app.router.add_post("/api/v1", self._handle)
        self.server = TestServer(app)

    async def _handle(self, request: web.Request) -> web.Response:
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.path,
                headers=dict(request.headers),
                body=await request.read(),
            )
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        return web.Response(status=self.status, text=self.body)

    def respond(self, status: int, body: str) -> None:
        self.status = status
        self.body = body

    @property
    def url(self) -> str:
        return str(self.server.make_url("/api/v1"))

    def settings(self, **overrides) -> Settings:
        return Settings(endpoint_url=self.url, **overrides)


@pytest_asyncio.fixture
async def attribution_server():
    server = FakeAttributionServer()
    await server.server.start_server()
    yield server
    await server.server.close()


class CountingTokenSource:
    def __init__(self, token: Optional[str]):
        self.token = token
        self.calls = 0

    def attribution_token(self) -> Optional[str]:
        self.calls += 1
        return self.token


@pytest.fixture
def token_source():
    return CountingTokenSource("sample-attribution-token")


async def collect_result(client: AttributionClient, settle: float = 0.05):
    """Run fetch_attribution on the current loop and return every callback result."""
    loop = asyncio.get_running_loop()
    first = loop.create_future()
    results: List[AttributionResult] = []

    def callback(result: AttributionResult) -> None:
        results.append(result)
        if not first.done():
            first.set_result(result)

    client.fetch_attribution(callback)
    await asyncio.wait_for(first, timeout=10)
    await asyncio.sleep(settle)
    return results
