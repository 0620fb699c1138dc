import logging

import httpx

from resizer.config.config import USER_AGENT
from resizer.errors import InaccessibleImage, InvalidPayload, InvalidRequest, NotFound

logger = logging.getLogger(__name__)

MAX_ALLOWED_BYTES = 20_000_000


async def _read_limited(response: httpx.Response, limit: int) -> bytes:
    declared = response.headers.get("content-length")
    if declared is not None:
        try:
            if int(declared) > limit:
                raise InvalidPayload()
        except ValueError:
            raise InvalidPayload()

    buffer = bytearray()
    try:
        async for chunk in response.aiter_bytes():
            buffer.extend(chunk)
            if len(buffer) > limit:
                raise InvalidPayload()
    except httpx.HTTPError:
        raise InvalidPayload()
    return bytes(buffer)


async def fetch_image(
    url: str,
    *,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    limit: int = MAX_ALLOWED_BYTES,
) -> bytes:
    """
    Single GET against an already validated source, body capped at `limit` bytes.
    Redirects are not followed so the allowlist cannot be bypassed.
    """
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=False,
        verify=True,
        headers={"User-Agent": USER_AGENT},
        transport=transport,
    ) as client:
        try:
            request = client.build_request("GET", url)
            response = await client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.info(f"Fetch failed for {url}: {e}")
            raise InvalidRequest()

        try:
            if response.status_code == 200:
                return await _read_limited(response, limit)
            if response.status_code == 404:
                raise NotFound()
            if response.status_code == 403:
                raise InaccessibleImage()
            logger.info(f"Unexpected status {response.status_code} from {url}")
            raise InvalidRequest()
        finally:
            await response.aclose()
