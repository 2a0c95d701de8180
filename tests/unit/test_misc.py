import pytest
from unittest.mock import AsyncMock, call, patch

from radix_utils.utils.misc import chunk_array, retry_gather


@pytest.mark.parametrize("items,size", [
    (list(range(10)), 3),
    (list(range(10)), 5),
    (list(range(10)), 10),
    (list(range(10)), 25),
    (['a'], 1),
])
def test_chunks_concatenate_back_to_input(items, size):
    chunks = chunk_array(items, size)

    assert [item for chunk in chunks for item in chunk] == items
    assert all(len(chunk) == size for chunk in chunks[:-1])
    assert 0 < len(chunks[-1]) <= size


def test_chunk_empty_input():
    assert chunk_array([], 100) == []


def test_chunk_150_ids_into_100_and_50():
    ids = [f"#{i}#" for i in range(1, 151)]
    chunks = chunk_array(ids, 100)

    assert [len(chunk) for chunk in chunks] == [100, 50]
    assert chunks[0] == ids[:100]
    assert chunks[1] == ids[100:]


@pytest.mark.parametrize("size", [0, -1])
def test_chunk_rejects_non_positive_size(size):
    with pytest.raises(ValueError):
        chunk_array([1, 2, 3], size)


@pytest.mark.asyncio
async def test_retry_gather_returns_results_in_order():
    first = AsyncMock(return_value='a')
    second = AsyncMock(return_value='b')

    results = await retry_gather([first, second], delay=0)

    assert results == ['a', 'b']
    first.assert_awaited_once()
    second.assert_awaited_once()


@pytest.mark.asyncio
async def test_retry_gather_reruns_whole_batch_after_failure():
    stable = AsyncMock(return_value='ok')
    flaky = AsyncMock(side_effect=[RuntimeError("gateway down"), 'recovered'])

    results = await retry_gather([stable, flaky], retries=3, delay=0)

    assert results == ['ok', 'recovered']
    # The operation that succeeded the first time is run again too
    assert stable.await_count == 2
    assert flaky.await_count == 2


@pytest.mark.asyncio
async def test_retry_gather_raises_last_error_when_attempts_exhausted():
    failing = AsyncMock(side_effect=[RuntimeError("first"), RuntimeError("second"), RuntimeError("third")])

    with pytest.raises(RuntimeError, match="third"):
        await retry_gather([failing], retries=3, delay=0)

    assert failing.await_count == 3


@pytest.mark.asyncio
async def test_retry_gather_of_no_operations():
    assert await retry_gather([], delay=0) == []


@pytest.mark.asyncio
async def test_retry_gather_rejects_zero_retries():
    with pytest.raises(ValueError):
        await retry_gather([AsyncMock()], retries=0)


@pytest.mark.asyncio
async def test_retry_gather_default_delays_double_from_one_second():
    failing = AsyncMock(side_effect=RuntimeError("gateway down"))

    with patch('asyncio.sleep', new_callable=AsyncMock) as mock_sleep:
        with pytest.raises(RuntimeError):
            await retry_gather([failing])

    assert failing.await_count == 3
    assert mock_sleep.await_args_list == [call(1.0), call(2.0)]
