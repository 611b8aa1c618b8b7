"""Splitting record sequences into store-sized batches."""

from typing import Sequence, TypeVar

T = TypeVar("T")


def split_batches(items: Sequence[T], max_batch_size: int) -> list[list[T]]:
    """Split items into contiguous batches of at most max_batch_size.

    Concatenating the batches in order gives back the original sequence.

    Raises:
        ValueError: If max_batch_size is not positive
    """
    if max_batch_size < 1:
        raise ValueError(f"max_batch_size must be positive, got {max_batch_size}")
    return [list(items[i : i + max_batch_size]) for i in range(0, len(items), max_batch_size)]
