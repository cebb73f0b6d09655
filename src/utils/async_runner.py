"""Run coroutines from synchronous Streamlit and CLI code."""

from __future__ import annotations

import asyncio
import concurrent.futures
from typing import Any, Coroutine, Optional


def run_async(coro: Coroutine[Any, Any, Any], timeout: Optional[float] = 600) -> Any:
    """Run ``coro`` to completion and return its result.

    Uses ``asyncio.run`` when no loop is running (CLI, plain Streamlit
    script run); otherwise runs it on a fresh loop in a worker thread.
    Exceptions raised by the coroutine propagate to the caller.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop (CLI context)
        return asyncio.run(coro)

    def _thread_target() -> Any:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(_thread_target).result(timeout=timeout)
