"""Exceptions raised by cyclewalk."""


class DomainError(ValueError):
    """Input outside the valid domain (n == 0, value >= n, bad bit widths)."""


class RetryExhaustedError(RuntimeError):
    """Cycle walk did not land inside [0, n) within the attempt ceiling.

    Attributes:
        value: Input whose walk was abandoned
        n: Domain size
        attempts: Number of Feistel applications performed
    """

    def __init__(self, value: int, n: int, attempts: int):
        self.value = value
        self.n = n
        self.attempts = attempts
        super().__init__(
            f"cycle walk for value {value} did not land in [0, {n}) "
            f"after {attempts} attempts"
        )
