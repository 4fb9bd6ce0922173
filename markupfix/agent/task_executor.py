from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple
logger = logging.getLogger(__name__)
TaskFactory = Callable[[], Awaitable[Any]]

@dataclass
class TaskOutcome:
    task_id: str
    result: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

async def run_with_concurrency_limit(tasks: Sequence[Tuple[str, TaskFactory]], limit: int) -> List[TaskOutcome]:
    """Run task factories with at most ``limit`` in flight; outcomes keep submission order."""
    if limit < 1:
        raise ValueError(f'Concurrency limit must be >= 1, got {limit}')
    semaphore = asyncio.Semaphore(limit)

    async def _run(task_id: str, factory: TaskFactory) -> TaskOutcome:
        async with semaphore:
            logger.debug('Starting task %s', task_id)
            try:
                result = await factory()
            except Exception as exc:
                logger.warning('Task %s failed: %s', task_id, exc)
                return TaskOutcome(task_id=task_id, error=exc)
            logger.debug('Task %s finished', task_id)
            return TaskOutcome(task_id=task_id, result=result)
    outcomes = await asyncio.gather(*(_run(task_id, factory) for task_id, factory in tasks))
    failed = sum((1 for o in outcomes if not o.ok))
    if failed:
        logger.info('%d of %d task(s) failed', failed, len(outcomes))
    return list(outcomes)
