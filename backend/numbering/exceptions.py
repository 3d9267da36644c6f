# numbering/exceptions.py
"""
Errors raised by the numbering engine.

All of them abort the transaction the allocation ran in. `retryable`
tells callers whether repeating the whole operation can succeed.
"""


class NumberingError(Exception):
    """Base class for numbering failures."""

    retryable = False

    def __init__(self, counter_code: str, message: str):
        self.counter_code = counter_code
        super().__init__(message)


class CounterDefinitionNotFound(NumberingError):
    """No counter definition exists for the requested code."""

    def __init__(self, counter_code: str):
        super().__init__(counter_code, f"Counter definition '{counter_code}' not found.")


class SequenceOverflow(NumberingError):
    """The next counter value does not fit the configured digit width."""

    def __init__(self, counter_code: str, value: int, width: int):
        self.value = value
        self.width = width
        super().__init__(
            counter_code,
            f"Next value ({value}) for counter '{counter_code}' exceeds "
            f"the maximum length of {width} digits.",
        )


class CounterTransactionConflict(NumberingError):
    """
    The allocation lost a lock wait, timed out or failed serialization.

    Transient: the caller may retry the whole operation.
    """

    retryable = True

    def __init__(self, counter_code: str, reason: str):
        self.reason = reason
        super().__init__(
            counter_code,
            f"Concurrent update on counter '{counter_code}' could not be serialized: {reason}",
        )
