"""
Bounded-concurrency task runner.

run_bounded() starts one task per item, lets at most `limit` of them run at
once, and returns only after every task has settled. Each task goes
queued -> running -> completed | failed; a failure is recorded in its
TaskOutcome and never cancels the others. There is no per-task timeout, so a
request that never returns keeps the join waiting.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Generic
from typing import List
from typing import Optional
from typing import Sequence
from typing import TypeVar

from bjiff_calendar.settings import MAX_CONCURRENT_REQUESTS

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class TaskOutcome(Generic[T, R]):
    """Result of one task: either `result` or `error` is set."""

    index: int
    item: T
    result: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_bounded(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    limit: int = MAX_CONCURRENT_REQUESTS,
    on_completed: Optional[Callable[[TaskOutcome[T, R]], Any]] = None,
) -> List[TaskOutcome[T, R]]:
    """
    Run `worker` over `items` with at most `limit` calls in flight.

    Args:
        items: Work items, one task each
        worker: Coroutine function invoked per item
        limit: Maximum number of simultaneously running tasks
        on_completed: Called once per settled task, in completion order; an
            exception it raises is logged and does not affect the outcome

    Returns:
        One TaskOutcome per item, in the order the items were given
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    if not items:
        return []

    semaphore = asyncio.Semaphore(limit)
    total = len(items)

    async def bound(index: int, item: T) -> TaskOutcome[T, R]:
        async with semaphore:
            outcome: TaskOutcome[T, R] = TaskOutcome(index=index, item=item)
            try:
                outcome.result = await worker(item)
            except Exception as e:
                outcome.error = e
                logger.debug(f"Task {index + 1}/{total} failed: {type(e).__name__}: {e}")
            else:
                logger.debug(f"Task {index + 1}/{total} completed")
        if on_completed is not None:
            try:
                on_completed(outcome)
            except Exception:
                logger.exception(f"Completion callback failed for task {index + 1}/{total}")
        return outcome

    outcomes = await asyncio.gather(*(bound(i, item) for i, item in enumerate(items)))
    failed = sum(1 for o in outcomes if not o.ok)
    logger.info(f"All {total} tasks settled ({total - failed} completed, {failed} failed)")
    return list(outcomes)
