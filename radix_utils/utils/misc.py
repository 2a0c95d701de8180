import asyncio
from typing import Any, Awaitable, Callable, List, Sequence, TypeVar

import backoff
import structlog

logger = structlog.get_logger()

T = TypeVar('T')


def chunk_array(items: Sequence[T], size: int) -> List[List[T]]:
    """
    Split a sequence into consecutive chunks of at most `size` items.

    Raises:
        ValueError: If size is not positive
    """
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    items = list(items)
    return [items[i:i + size] for i in range(0, len(items), size)]


def _log_retry(details: dict) -> None:
    logger.warning(
        "retrying_batch",
        attempt=details['tries'],
        wait_seconds=details['wait'],
        error=str(details['exception']),
    )


async def retry_gather(operations: Sequence[Callable[[], Awaitable[T]]],
                       retries: int = 3, delay: float = 1.0) -> List[T]:
    """
    Run operations concurrently, retrying the whole batch if any of them fails.

    Each operation is a zero-argument callable returning an awaitable, so a
    retry starts every request again from scratch. Results of a failed attempt
    are discarded. Waits delay, 2*delay, 4*delay... seconds between attempts.

    Args:
        operations: Callables producing the awaitables to run
        retries: Maximum number of attempts
        delay: Wait before the second attempt, in seconds

    Returns:
        list: Results in the same order as operations

    Raises:
        Exception: The last failure once every attempt has failed
    """
    if retries < 1:
        raise ValueError(f"retries must be at least 1, got {retries}")

    @backoff.on_exception(
        backoff.expo,
        Exception,
        max_tries=retries,
        factor=delay,
        jitter=None,
        on_backoff=_log_retry
    )
    async def _run_all() -> List[Any]:
        return list(await asyncio.gather(*(operation() for operation in operations)))

    return await _run_all()
