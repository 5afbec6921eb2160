"""Partitioning of records into request-sized batches."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

# The backend accepts at most 200 time series per create request.
MAX_TIMESERIES_PER_REQUEST = 150


def partition(
    records: Sequence[T], max_batch_size: int = MAX_TIMESERIES_PER_REQUEST
) -> list[list[T]]:
    """Split records into consecutive batches of at most max_batch_size.

    Input order is preserved; only the last batch may be smaller.
    """
    if max_batch_size < 1:
        raise ValueError(f"max_batch_size must be positive, got {max_batch_size}")
    return [
        list(records[i : i + max_batch_size])
        for i in range(0, len(records), max_batch_size)
    ]
