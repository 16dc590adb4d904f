"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Content / metadata
  2xxx: Catalog
  3xxx: Actions
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Content ---

class MetadataUnavailableError(AppError):
    """Per-item failure; always recovered by the caller with placeholder metadata."""

    def __init__(self, locator: str, detail: str = "") -> None:
        self.locator = locator
        msg = f"Metadata unavailable for {locator!r}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(1001, msg, 502)


# --- 2xxx: Catalog ---

class CatalogUnavailableError(AppError):
    def __init__(self, detail: str = "ledger unreachable") -> None:
        super().__init__(2001, f"Catalog unavailable: {detail}", 503)


class ItemNotFoundError(AppError):
    def __init__(self, nft_address: str, token_id: int) -> None:
        super().__init__(2002, f"Item not found: {nft_address}#{token_id}", 404)


class InvalidFilterError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2003, f"Invalid filter: {detail}", 422)


# --- 3xxx: Actions ---

class ActionValidationError(AppError):
    def __init__(self, message: str, http_status: int = 422) -> None:
        super().__init__(3001, message, http_status)


class ActionRejectedError(AppError):
    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(3002, reason, 502)


class WalletNotConnectedError(ActionValidationError):
    def __init__(self) -> None:
        super().__init__("Wallet not connected", 401)
        self.code = 3003


# --- Ledger adapter failures (not user-facing on their own) ---

class LedgerError(Exception):
    """Raised by ledger adapters for failed reads, reverted or rejected writes.

    `reason` is the ledger's human-readable revert/rejection reason, if any.
    """

    def __init__(self, message: str, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(message)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class NumericOverflowError(AppError):
    def __init__(self, field: str, value: object, limit: int) -> None:
        super().__init__(
            9003,
            f"{field}={value!r} is outside the supported range [0, {limit}]",
            422,
        )
