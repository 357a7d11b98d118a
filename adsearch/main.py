import asyncio
from typing import Callable

import aiohttp
import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .client import AttributionClient
from .config import VERSION, settings
from .errors import AdSearchError, AdSearchErrorKind, InvalidTokenError
from .logging_config import configure_logging
from .tokens import StaticTokenSource, TokenSource

configure_logging(settings)
logger = structlog.get_logger(__name__)

ERROR_STATUS = {
    AdSearchErrorKind.INVALID_TOKEN: 400,
    AdSearchErrorKind.INVALID_URL: 500,
    AdSearchErrorKind.INVALID_RESPONSE: 502,
}

ClientFactory = Callable[[TokenSource], AttributionClient]

app = FastAPI(
    title="AdSearch Attribution Relay",
    version=VERSION,
    description="Relays device attribution tokens to the Apple Ads attribution API.",
)


def get_client_factory() -> ClientFactory:
    return lambda source: AttributionClient(source, settings=settings)


@app.exception_handler(AdSearchError)
async def adsearch_error_handler(request: Request, exc: AdSearchError) -> JSONResponse:
    logger.info("attribution_failed", kind=exc.kind.value)
    return JSONResponse(
        status_code=ERROR_STATUS[exc.kind],
        content={"error": exc.kind.value, "detail": exc.message},
    )


async def upstream_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # aiohttp's timeout errors are both ClientError and TimeoutError.
    if isinstance(exc, asyncio.TimeoutError):
        logger.warning("attribution_upstream_timeout")
        return JSONResponse(
            status_code=504,
            content={"error": "upstream_timeout", "detail": "Attribution API timed out"},
        )
    logger.warning("attribution_upstream_unreachable", error=str(exc))
    return JSONResponse(
        status_code=502,
        content={"error": "upstream_unreachable", "detail": str(exc)},
    )


app.add_exception_handler(asyncio.TimeoutError, upstream_error_handler)
app.add_exception_handler(aiohttp.ClientError, upstream_error_handler)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": VERSION}


@app.post("/attribution")
async def relay_attribution(
    request: Request, client_factory: ClientFactory = Depends(get_client_factory)
) -> dict:
    raw = await request.body()
    try:
        token = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidTokenError("Attribution token must be UTF-8 text") from exc

    record = await client_factory(StaticTokenSource(token)).attribution()
    logger.info("attribution_relayed", attribution=record.attribution, sandbox=record.is_sandbox)
    return {**record.to_payload(), "isSandbox": record.is_sandbox}
