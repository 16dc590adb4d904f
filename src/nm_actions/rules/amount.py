"""Display-unit amount validation (list price, minimum bid, bid amount)."""

from src.nm_common.errors import ActionValidationError
from src.nm_common.wei import MAX_SAFE_INT, MAX_UINT256, parse_ether


def check_positive_amount(text: str | None, message: str) -> int:
    """Parse an ether amount exactly and return wei; raise with `message` unless > 0."""
    try:
        wei = parse_ether(text or "")
    except ValueError:
        raise ActionValidationError(message) from None
    if not (0 < wei <= MAX_UINT256):
        raise ActionValidationError(message)
    return wei


def check_positive_duration(seconds: int) -> int:
    if isinstance(seconds, bool) or not (0 < seconds <= MAX_SAFE_INT):
        raise ActionValidationError(f"Auction duration must be positive, got {seconds}")
    return seconds
