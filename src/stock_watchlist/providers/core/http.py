"""JSON GET helper that turns httpx failures into provider exceptions."""
import logging
from typing import Any

import httpx

from stock_watchlist.providers.core.exceptions import (
    NetworkFailure,
    VendorInvalidResponse,
    VendorRateLimited,
    VendorTimeout,
)

logger = logging.getLogger(__name__)


async def fetch_json(
    client: httpx.AsyncClient,
    path: str,
    *,
    vendor: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    not_found_ok: bool = False,
) -> Any:
    """GET ``path`` and decode the JSON body.

    Returns None for a 404 when ``not_found_ok`` is set.

    Raises:
        VendorTimeout: the request timed out.
        NetworkFailure: other transport errors or upstream 5xx.
        VendorRateLimited: HTTP 429.
        VendorInvalidResponse: any other non-2xx status or a non-JSON body.
    """
    try:
        response = await client.get(path, params=params, headers=headers)
    except httpx.TimeoutException as e:
        raise VendorTimeout(
            f"{vendor} request timed out: {e}",
            vendor=vendor,
            context={"path": path},
        ) from e
    except httpx.RequestError as e:
        raise NetworkFailure(
            f"{vendor} request failed: {e}",
            vendor=vendor,
            context={"path": path},
        ) from e

    status = response.status_code
    if status == 404 and not_found_ok:
        return None
    if status == 429:
        raise VendorRateLimited(
            f"{vendor} rate limit exceeded",
            vendor=vendor,
            context={"path": path, "status_code": status},
        )
    if status >= 500:
        raise NetworkFailure(
            f"{vendor} server error {status}",
            vendor=vendor,
            context={"path": path, "status_code": status},
        )
    if not response.is_success:
        logger.debug("%s HTTP %s for %s: %s", vendor, status, path, response.text[:200])
        raise VendorInvalidResponse(
            f"{vendor} HTTP error {status}",
            vendor=vendor,
            context={"path": path, "status_code": status},
        )

    try:
        return response.json()
    except ValueError as e:
        raise VendorInvalidResponse(
            f"{vendor} returned a non-JSON body",
            vendor=vendor,
            context={"path": path},
        ) from e
