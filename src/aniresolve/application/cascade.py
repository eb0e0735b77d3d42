"""Ordered fallback cascade with explicit per-candidate outcomes.

Each candidate is attempted strictly in order; a later candidate is never
started before the earlier one's outcome is known.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

import structlog

log = structlog.get_logger(__name__)

C = TypeVar("C")
T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """Attempt succeeded; the cascade stops here."""

    value: T


@dataclass(frozen=True)
class TryNext:
    """Attempt did not produce a value; move on to the next candidate."""

    reason: str = ""


@dataclass(frozen=True)
class Exhausted:
    """No candidate succeeded."""

    attempts: int = 0
    reasons: tuple[str, ...] = field(default_factory=tuple)


Outcome = Union[Found[T], TryNext]
CascadeResult = Union[Found[T], Exhausted]


async def run_cascade(
    candidates: Iterable[C],
    attempt: Callable[[C], Awaitable[Outcome[T]]],
    *,
    name: str,
) -> CascadeResult[T]:
    """Run *attempt* over *candidates* until one returns ``Found``.

    Exceptions raised by *attempt* are logged and treated as ``TryNext``;
    they never escape the cascade.
    """
    reasons: list[str] = []
    for index, candidate in enumerate(candidates):
        try:
            outcome = await attempt(candidate)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "cascade_attempt_failed",
                cascade=name,
                index=index,
                candidate=str(candidate),
                error=repr(exc),
            )
            reasons.append(f"{candidate}: {exc!r}")
            continue

        if isinstance(outcome, Found):
            log.debug("cascade_found", cascade=name, index=index)
            return outcome

        log.debug(
            "cascade_try_next",
            cascade=name,
            index=index,
            candidate=str(candidate),
            reason=outcome.reason,
        )
        reasons.append(f"{candidate}: {outcome.reason}")

    log.info("cascade_exhausted", cascade=name, attempts=len(reasons))
    return Exhausted(attempts=len(reasons), reasons=tuple(reasons))
