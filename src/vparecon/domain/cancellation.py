"""Cooperative cancellation for long-running batch and matching runs."""


class CancellationToken:
    """Flag checked between chunks and batches.

    Cancelling does not interrupt a store call already in flight; the run
    stops before issuing the next one.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled
