"""
Pool accrual error kinds.

Every error aborts the triggering operation; the ledger runs inside a
database transaction so nothing raised here leaves a partial write behind.
"""


class AccrualError(Exception):
    """Base class for everything the accrual engine and ledger raise."""


class FixedWidthOverflow(AccrualError, OverflowError):
    """An arithmetic result does not fit its fixed integer width."""

    def __init__(self, value: int, bits: int, what: str = "value"):
        self.value = value
        self.bits = bits
        super().__init__(f"{what} {value} does not fit in uint{bits}")


class PrincipalOverflow(FixedWidthOverflow):
    def __init__(self, value: int, bits: int = 104):
        super().__init__(value, bits, what="principal")


class TimestampOverflow(FixedWidthOverflow):
    def __init__(self, value: int, bits: int = 40):
        super().__init__(value, bits, what="timestamp")


class NegativeBalanceError(AccrualError, ValueError):
    """A withdrawal exceeds the account's convertible present value."""

    def __init__(self, account: str, present_value: int, delta: int):
        self.account = account
        self.present_value = present_value
        self.delta = delta
        super().__init__(
            f"withdrawal of {-delta} exceeds present value {present_value} for {account}"
        )


class IndexRegressionError(AccrualError):
    pass


class ClockRegressionError(AccrualError):
    pass


class ZeroIndexError(AccrualError, ZeroDivisionError):
    pass


class PoolInvariantError(AccrualError):
    pass


class OracleUnavailable(AccrualError):
    """The rate source could not be reached or returned an unusable answer."""
