"""Mirror liveness via HEAD.

A GET on an HLS playlist or mp4 starts pulling the stream itself, so a
mirror that rejects HEAD (405) simply counts as not live.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from httpx import HTTPError, TimeoutException

if TYPE_CHECKING:
    from httpx import AsyncClient

log = structlog.get_logger(__name__)


class HttpLinkValidator:
    """``LinkValidatorPort`` over a shared ``httpx.AsyncClient``.

    At most *max_concurrent* HEAD requests are in flight at once, each
    bounded by *timeout_seconds*.
    """

    def __init__(
        self,
        http_client: AsyncClient,
        timeout_seconds: float = 5.0,
        max_concurrent: int = 10,
    ) -> None:
        self._client = http_client
        self._timeout = timeout_seconds
        self._slots = asyncio.Semaphore(max_concurrent)

    async def _head_status(self, url: str) -> int | None:
        async with self._slots:
            try:
                response = await self._client.head(
                    url, timeout=self._timeout, follow_redirects=True
                )
            except TimeoutException:
                log.debug("mirror_head_timeout", url=url, timeout=self._timeout)
                return None
            except HTTPError as exc:
                log.debug("mirror_head_http_error", url=url, error=str(exc))
                return None
            except Exception as exc:  # noqa: BLE001
                log.warning("mirror_head_unexpected_error", url=url, error=str(exc))
                return None
        return response.status_code

    async def validate(self, url: str) -> bool:
        if not url.startswith(("http://", "https://")):
            return False
        status = await self._head_status(url)
        live = status is not None and status < 400
        log.debug("mirror_head_result", url=url, status_code=status, valid=live)
        return live

    async def validate_batch(self, urls: list[str]) -> dict[str, bool]:
        """Map every URL in *urls* to its liveness; repeats share one HEAD."""
        if not urls:
            return {}

        distinct = list(dict.fromkeys(urls))
        verdicts = dict(zip(distinct, await asyncio.gather(*map(self.validate, distinct))))
        log.info(
            "mirror_batch_checked",
            total=len(urls),
            unique=len(distinct),
            live=sum(verdicts.values()),
        )
        return {url: verdicts[url] for url in urls}
