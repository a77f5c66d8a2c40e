import asyncio
import time
import httpx
import logging
from typing import Optional, Dict

from models.report import HttpProbeResult

# Default timeout configuration (in seconds)
DEFAULT_TIMEOUT = 10.0
DEFAULT_CONNECT_TIMEOUT = 5.0
AUXILIARY_TIMEOUT = 5.0 # robots.txt, sitemap.xml

USER_AGENT = "SiteScope Security Analyzer/1.0"

logger = logging.getLogger(__name__)


async def fetch_url(
    url: str,
    timeout: Optional[float] = None,
    connect_timeout: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """
    Fetches a URL with GET, following redirects and reading the full body.

    Args:
        url: The URL to fetch
        timeout: Total request timeout in seconds (default: 10s)
        connect_timeout: Connection timeout in seconds (default: 5s)
        headers: Optional extra HTTP headers; the SiteScope User-Agent is always sent
        transport: Optional httpx transport (tests pass a MockTransport)

    Returns:
        httpx.Response object

    Raises:
        httpx.TimeoutException, httpx.RequestError on network failure
    """
    timeout = timeout or DEFAULT_TIMEOUT
    logger.debug(f"HTTP GET {url} (timeout: {timeout}s)")

    timeout_config = httpx.Timeout(
        timeout=timeout,
        connect=min(connect_timeout or DEFAULT_CONNECT_TIMEOUT, timeout)
    )
    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)

    async with httpx.AsyncClient(
        timeout=timeout_config,
        follow_redirects=True,
        transport=transport,
    ) as client:
        response = await client.get(url, headers=request_headers)
        logger.debug(f"HTTP {response.status_code} {url} ({len(response.content)} bytes)")
        # Don't raise for status - callers decide what a non-2xx means
        return response


async def probe_url(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> HttpProbeResult:
    """
    Fetches a URL under a hard deadline and records what came back.

    Network errors and timeouts never escape: they produce a result with
    fetch_failed=True and the time spent up to the failure.
    """
    start = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - start) * 1000)

    try:
        # httpx enforces per-phase timeouts; wait_for caps the whole exchange
        response = await asyncio.wait_for(
            fetch_url(url, timeout=timeout, transport=transport),
            timeout=timeout,
        )
        body = response.text
    except asyncio.TimeoutError:
        logger.warning(f"HTTP timeout for {url} after {timeout}s")
        return HttpProbeResult.failed(elapsed_ms())
    except httpx.TimeoutException as e:
        logger.warning(f"HTTP timeout for {url}: {e}")
        return HttpProbeResult.failed(elapsed_ms())
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"HTTP request error for {url}: {type(e).__name__}: {e}")
        return HttpProbeResult.failed(elapsed_ms())

    response_time_ms = elapsed_ms()
    headers = {k.lower(): v for k, v in response.headers.items()}
    return HttpProbeResult(
        status_ok=response.is_success,
        headers=headers,
        body=body,
        response_time_ms=response_time_ms,
        fetch_failed=False,
        status_code=response.status_code,
    )


async def check_reachable(
    url: str,
    timeout: float = AUXILIARY_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """True when the URL answers with a 2xx status within the timeout."""
    result = await probe_url(url, timeout=timeout, transport=transport)
    logger.debug(f"Reachability {url}: {result.status_ok} (status: {result.status_code})")
    return result.status_ok
