from decimal import Decimal


class LedgerError(Exception):
    """Base class for errors raised by the ledger engine."""


class SplitValidationError(LedgerError):
    """Raw split input does not satisfy the rule of its split method.

    Always carries the numbers involved so the caller can show the exact
    discrepancy (``expected`` is the required total or threshold, ``actual``
    what was entered).
    """

    def __init__(
        self,
        reason: str,
        message: str,
        expected: Decimal,
        actual: Decimal,
        method: str | None = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.expected = expected
        self.actual = actual
        self.method = method

    @property
    def difference(self) -> Decimal:
        return self.expected - self.actual


class DataIntegrityError(LedgerError):
    """A record in a snapshot is structurally malformed."""

    def __init__(self, record_id: str | None, reason: str):
        super().__init__(f"Record {record_id or '<unknown>'}: {reason}")
        self.record_id = record_id
        self.reason = reason
