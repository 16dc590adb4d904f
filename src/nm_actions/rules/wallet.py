from src.nm_common.errors import WalletNotConnectedError


def check_wallet_connected(account: str | None) -> str:
    """Return the normalized caller account or raise WalletNotConnectedError."""
    if account is None or not account.strip():
        raise WalletNotConnectedError()
    return account.strip()
