"""
Fixed-point helpers shared by the accrual engine and the principal ledger.

All values are plain Python ints. Python never wraps, so the widths below are
enforced explicitly: anything that would not fit the on-chain storage width
raises instead of being silently truncated. Divisions always floor, which
means present value is never over-credited.
"""

from .errors import (
    FixedWidthOverflow,
    PrincipalOverflow,
    TimestampOverflow,
    ZeroIndexError,
)

# Protocol constants of the rate source (not configurable)
BASE_INDEX_SCALE = 10**15
TRACKING_INDEX_SCALE = 10**15
INDEX_SCALE = BASE_INDEX_SCALE
FACTOR_SCALE = 10**18
RATE_SCALE = FACTOR_SCALE

MAX_U40 = 2**40 - 1
MAX_U64 = 2**64 - 1
MAX_U104 = 2**104 - 1
MAX_U256 = 2**256 - 1


def _check_width(value: int, bits: int) -> int:
    if value < 0 or value > 2**bits - 1:
        raise FixedWidthOverflow(value, bits)
    return value


def to_u40(value: int) -> int:
    if value < 0 or value > MAX_U40:
        raise TimestampOverflow(value)
    return value


def to_u64(value: int) -> int:
    return _check_width(value, 64)


def to_u104(value: int) -> int:
    if value < 0 or value > MAX_U104:
        raise PrincipalOverflow(value)
    return value


def to_u256(value: int) -> int:
    return _check_width(value, 256)


def checked_add(a: int, b: int, bits: int = 256) -> int:
    return _check_width(a + b, bits)


def checked_sub(a: int, b: int) -> int:
    """Unsigned subtraction; an underflow is reported as an overflow of uint256."""
    return _check_width(a - b, 256)


def scaled_mul(n: int, factor: int, scale: int) -> int:
    """
    Return ``n * factor / scale`` rounded toward zero.

    The intermediate product must fit the 256-bit working width, mirroring
    the on-chain multiplication that happens before the division.
    """
    if n < 0 or factor < 0:
        raise ValueError("scaled_mul operands must be non-negative")
    if scale <= 0:
        raise ValueError("scale must be positive")
    product = to_u256(n * factor)
    return product // scale


def present_value(index: int, principal: int) -> int:
    """Present value of ``principal`` at supply ``index`` (floored)."""
    return scaled_mul(principal, index, INDEX_SCALE)


def principal_value(index: int, present: int) -> int:
    """
    Principal units worth ``present`` at supply ``index`` (floored).

    Raises ZeroIndexError for a zero index and PrincipalOverflow when the
    result does not fit uint104.
    """
    if index == 0:
        raise ZeroIndexError("supply index is zero")
    if present < 0:
        raise ValueError("present value must be non-negative")
    return to_u104(to_u256(present * INDEX_SCALE) // index)
