"""Integer arithmetic utilities for wei-denominated amounts.

All prices, bids and volumes are int (wei). Floats are never used for
ordering or equality; Decimal only appears when parsing user-entered text.
Chain integers enter the system through the checked converters below.
"""

from decimal import Decimal, InvalidOperation

from src.nm_common.errors import NumericOverflowError

WEI_DECIMALS = 18
WEI_PER_ETHER = 10**WEI_DECIMALS

# Largest integer a JSON/JS consumer can represent exactly.
MAX_SAFE_INT = 2**53 - 1
MAX_UINT256 = 2**256 - 1


def _coerce_int(value: object, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError:
            raise ValueError(f"{field} is not an integer: {value!r}") from None
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{field} is not an integer: {value!r}")
        return int(value)
    raise ValueError(f"{field} has unsupported type {type(value).__name__}")


def to_safe_int(value: object, field: str = "value") -> int:
    """Convert a chain integer (token id, timestamp, duration, index) to int.

    Raises NumericOverflowError outside [0, 2**53 - 1].
    """
    n = _coerce_int(value, field)
    if not (0 <= n <= MAX_SAFE_INT):
        raise NumericOverflowError(field, value, MAX_SAFE_INT)
    return n


def to_wei(value: object, field: str = "amount") -> int:
    """Convert a chain amount to int wei. Raises NumericOverflowError outside uint256."""
    n = _coerce_int(value, field)
    if not (0 <= n <= MAX_UINT256):
        raise NumericOverflowError(field, value, MAX_UINT256)
    return n


def format_ether(wei: int) -> str:
    """Render wei in ether units: 5*10**17 -> '0.5', 10**18 -> '1.0'.

    Always keeps at least one fractional digit and strips trailing zeros.
    """
    sign = "-" if wei < 0 else ""
    whole, frac = divmod(abs(wei), WEI_PER_ETHER)
    frac_text = f"{frac:0{WEI_DECIMALS}d}".rstrip("0") or "0"
    return f"{sign}{whole}.{frac_text}"


def parse_ether(text: str) -> int:
    """Parse a decimal ether string exactly into wei: '0.5' -> 5*10**17.

    Raises ValueError for empty, non-numeric, non-finite input or more than
    18 fractional digits.
    """
    if text is None or not str(text).strip():
        raise ValueError("amount is empty")
    try:
        amount = Decimal(str(text).strip())
    except InvalidOperation:
        raise ValueError(f"amount is not a number: {text!r}") from None
    if not amount.is_finite():
        raise ValueError(f"amount is not finite: {text!r}")
    scaled = amount.scaleb(WEI_DECIMALS)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"amount has more than {WEI_DECIMALS} decimals: {text!r}")
    return int(scaled)


def wei_to_display(wei: int) -> str:
    """'1.25 ETH' style display string."""
    return f"{format_ether(wei)} ETH"
