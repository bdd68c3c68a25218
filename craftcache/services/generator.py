import logging
from typing import Optional

import httpx

from ..config import GENERATOR_BASE_URL, GENERATOR_TIMEOUT, GENERATOR_USER_AGENT, NOTHING_RESULT
from ..errors import ComputeFailure
from .combination import ElementProduced, NoResult

logger = logging.getLogger(__name__)


class HttpPairGenerator:
    """Compute function backed by an Infinite Craft style `pair` endpoint."""

    def __init__(
        self,
        base_url: str = GENERATOR_BASE_URL,
        timeout: float = GENERATOR_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "User-Agent": GENERATOR_USER_AGENT,
                "Referer": f"{self.base_url}/infinite-craft/",
            },
        )

    def __call__(self, left: str, right: str):
        try:
            resp = self.client.get(
                "/api/infinite-craft/pair", params={"first": left, "second": right}
            )
        except httpx.TimeoutException as e:
            raise ComputeFailure(f"generator timed out for {left!r}+{right!r}") from e
        except httpx.HTTPError as e:
            raise ComputeFailure(f"generator request failed for {left!r}+{right!r}: {e}") from e

        if resp.status_code != 200:
            logger.warning(
                "generator_bad_status left=%s right=%s status=%s", left, right, resp.status_code
            )
            raise ComputeFailure(f"generator returned {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ComputeFailure(f"generator returned invalid JSON for {left!r}+{right!r}") from e

        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, str) or not result:
            raise ComputeFailure(f"generator response for {left!r}+{right!r} has no result")
        if result == NOTHING_RESULT:
            return NoResult()
        return ElementProduced(
            name=result,
            icon=str(data.get("emoji") or ""),
            upstream_new=bool(data.get("isNew")),
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
