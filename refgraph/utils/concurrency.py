"""Fail-fast concurrent gathering for startup data loads.

The two datasets are fetched at the same time, but a partial dataset is
useless: the first failure cancels the remaining fetches and propagates.
This is the opposite policy to a best-effort fan-out, where failures are
logged and the surviving results merged.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

import structlog

from refgraph.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


async def gather_or_cancel(*coros: Awaitable[_T]) -> list[_T]:
    """Run awaitables concurrently, cancelling the rest on the first failure.

    Parameters
    ----------
    *coros:
        Awaitable objects to execute concurrently.

    Returns
    -------
    list[_T]
        Results in the same order as the input coroutines.

    Raises
    ------
    BaseException
        The first exception raised by any awaitable.  All other pending
        awaitables are cancelled and awaited before it propagates.
    """
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        pending = [t for t in tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            _logger.debug("gather_cancelled_pending", cancelled=len(pending))
        raise
