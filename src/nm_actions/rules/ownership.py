"""Caller vs. seller checks. Addresses compare case-insensitively."""

from src.nm_common.errors import ActionValidationError


def same_account(a: str | None, b: str | None) -> bool:
    return a is not None and b is not None and a.lower() == b.lower()


def check_not_seller(account: str, seller: str | None, message: str) -> None:
    if same_account(account, seller):
        raise ActionValidationError(message)


def check_is_seller(account: str, seller: str | None) -> None:
    if not same_account(account, seller):
        raise ActionValidationError("Only the seller can cancel this listing", 403)
