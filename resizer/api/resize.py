import asyncio
import logging
from concurrent.futures import Executor
from functools import partial

import httpx
from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import Response

from resizer.config.config import Settings, settings
from resizer.infrastructure.http_client import fetch_image
from resizer.services.allowlist import validate_source
from resizer.services.cache_headers import compose_cache_headers
from resizer.services.format_negotiation import ResizeImageFormat
from resizer.services.image_service import process_image
from resizer.services.resize_calculator import round_dimension

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings() -> Settings:
    return settings


def get_fetch_transport() -> httpx.AsyncBaseTransport | None:
    """Outbound transport for source fetches; None uses httpx's default."""
    return None


def get_image_pool(request: Request) -> Executor | None:
    return getattr(request.app.state, "image_pool", None)


def _to_pixels(value: float | None) -> int | None:
    if value is None:
        return None
    return max(1, round_dimension(value))


@router.get("/resize")
async def resize(
    source: str = Query(...),
    width: float | None = Query(None, gt=0, allow_inf_nan=False),
    height: float | None = Query(None, gt=0, allow_inf_nan=False),
    quality: int | None = Query(None),
    format: ResizeImageFormat | None = Query(None),
    accept: str | None = Header(None),
    config: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_fetch_transport),
    pool: Executor | None = Depends(get_image_pool),
):
    """
    Resize an image hosted on an allowed host.

    Example: /resize?source=https://img.example.com/a.jpg&width=500&height=500&quality=85&format=auto
    """
    validate_source(source, config.allowed_host_set)

    data = await fetch_image(source, timeout=config.fetch_timeout, transport=transport)

    job = partial(
        process_image,
        data,
        width=_to_pixels(width),
        height=_to_pixels(height),
        quality=quality if quality is not None else config.default_quality,
        format=format,
        accept=accept,
    )
    result = await asyncio.get_running_loop().run_in_executor(pool, job)
    logger.debug(f"Resized {source} to {result.width}x{result.height} ({len(result.content)} bytes)")

    headers = compose_cache_headers(config.cache_expiration, config.cache_jitter).headers()
    if result.vary:
        headers["Vary"] = result.vary

    return Response(content=result.content, media_type=result.content_type, headers=headers)
