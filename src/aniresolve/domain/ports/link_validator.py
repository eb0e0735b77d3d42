"""Port for checking whether a stream mirror URL exists."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LinkValidatorPort(Protocol):
    """Checks if a stream URL is reachable without downloading it."""

    async def validate(self, url: str) -> bool:
        """Header-only existence check.

        Args:
            url: Candidate stream URL.

        Returns:
            True if the mirror answers 2xx/3xx, False otherwise.
        """
        ...

    async def validate_batch(self, urls: list[str]) -> dict[str, bool]:
        """Check multiple URLs concurrently.

        Returns:
            Dict mapping url -> is_valid.
        """
        ...
