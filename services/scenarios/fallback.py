from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_fallback(
    primary: Callable[[], Awaitable[T]],
    fallback: Callable[[], T],
    *,
    stage: str,
    scenario_type: Optional[str] = None,
) -> T:
    """Return primary()'s result, or fallback()'s if primary raises anything.

    The primary failure is logged and never re-raised. Errors from the
    fallback itself propagate: it is the last line.
    """
    try:
        return await primary()
    except Exception as exc:
        logger.warning(
            "%s failed (%s: %s); using rule-based fallback",
            stage,
            type(exc).__name__,
            exc,
            extra={"extra": {"stage": stage, "scenario_type": scenario_type, "source": "deterministic"}},
        )
    return fallback()
