import threading


class OperationCancelledError(Exception):
    """Raised when a long-running search is cancelled by its caller."""

    def __init__(self, operation: str = "") -> None:
        self.operation = operation
        message = f"{operation}: operation cancelled" if operation else "operation cancelled"
        super().__init__(message)


class CancellationToken:
    """
    Cooperative cancellation signal shared between a caller and a search.

    The solver checks the token before every evaluation, so cancellation
    latency is bounded by one evaluation. Wall-clock timeouts are layered
    on top by the caller (e.g. a ``threading.Timer`` calling ``cancel``).
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, operation: str = "") -> None:
        if self._event.is_set():
            raise OperationCancelledError(operation)
