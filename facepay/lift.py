"""
Lift — turning collaborator calls into lazy Results.

Face service and ledger adapters raise; the core only ever sees Result.
Every remote call goes through `guarded`, which adds the request-level
timeout on top of combinators' exception capture.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Awaitable

from combinators.lift import catching_async

from facepay._types import Lazy


# ═══════════════════════════════════════════════════════════════════════════════
# guarded() — timeout + exception capture
# ═══════════════════════════════════════════════════════════════════════════════

def guarded[T, E](
    action: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
    timeout: float | None = None,
) -> Lazy[T, E]:
    """
    Lift an async collaborator call into a lazy Result.

    A timeout surfaces as TimeoutError through on_error, so callers
    classify it exactly like any other upstream failure.

    Example:
        claim = await guarded(
            lambda: resolver.resolve(photo),
            on_error=lambda e: UpstreamError.from_exception("face service", e),
            timeout=15.0,
        )
    """
    async def bounded() -> T:
        if timeout is None:
            return await action()
        return await asyncio.wait_for(action(), timeout)

    return catching_async(bounded, on_error=on_error)


__all__ = (
    "guarded",
)
