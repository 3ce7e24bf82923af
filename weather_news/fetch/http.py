"""
Async JSON fetching over httpx.

Every upstream call goes through get_json, which bounds the request with
the configured timeout, retries transport failures and 5xx answers with a
short linear back-off, and maps failures onto the pipeline error taxonomy.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..config import FetchConfig
from ..core.errors import FetchError, HttpError, NetworkError, ParseError

logger = logging.getLogger(__name__)


async def get_json(
    url: str,
    params: dict[str, Any],
    cfg: FetchConfig,
    service: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """GET a URL and decode the JSON body.

    Args:
        url: Endpoint URL without query string
        params: Query parameters (may contain API keys, never logged)
        cfg: Timeout, retry and proxy settings
        service: Upstream name used in error messages, e.g. "Weather"
        transport: Optional httpx transport, used to fake the upstream in tests

    Returns:
        The decoded JSON payload

    Raises:
        HttpError: Upstream answered with a non-2xx status
        ParseError: Body was not valid JSON
        NetworkError: No response (connection failure or timeout)
    """
    headers = {"User-Agent": cfg.user_agent, "Accept": "application/json"}
    last_error: FetchError = NetworkError(
        f"{service} request was not attempted (retries={cfg.retries})"
    )

    for attempt in range(cfg.retries + 1):
        try:
            async with httpx.AsyncClient(
                timeout=cfg.timeout_seconds,
                headers=headers,
                trust_env=cfg.trust_env,
                transport=transport,
            ) as client:
                resp = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            last_error = NetworkError(
                f"{service} request timed out after {cfg.timeout_seconds}s: {exc}"
            )
        except httpx.HTTPError as exc:
            last_error = NetworkError(f"{service} request failed: {type(exc).__name__}: {exc}")
        else:
            logger.debug("GET %s -> %s", url, resp.status_code)
            if resp.is_success:
                try:
                    return resp.json()
                except ValueError as exc:
                    raise ParseError(f"{service} response is not valid JSON: {exc}") from exc
            last_error = HttpError(resp.status_code, resp.text, service=service)
            # Client errors will not change on retry
            if resp.status_code < 500:
                raise last_error

        if attempt < cfg.retries:
            logger.debug("%s attempt %d failed: %s", service, attempt + 1, last_error)
            await asyncio.sleep(0.5 * (attempt + 1))

    raise last_error
