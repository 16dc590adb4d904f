from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Ledger gateway (defaults match a local hardhat node behind the gateway)
    LEDGER_GATEWAY_URL: str = "http://localhost:8600"
    LEDGER_TIMEOUT_SECONDS: float = 15.0
    TX_POLL_INTERVAL_SECONDS: float = 1.0
    TX_TIMEOUT_SECONDS: float = 120.0

    # Contracts: zero address until deployed
    NFT_CONTRACT_ADDRESS: str = "0x0000000000000000000000000000000000000000"
    MARKETPLACE_CONTRACT_ADDRESS: str = "0x0000000000000000000000000000000000000000"

    # Content resolution
    IPFS_GATEWAY: str = "https://ipfs.io/ipfs/"
    METADATA_TIMEOUT_SECONDS: float = 10.0
    METADATA_CONCURRENCY: int = 16

    # Auctions
    AUCTION_TICK_SECONDS: float = 1.0
    DEFAULT_AUCTION_DURATION_SECONDS: int = 86400  # 1 day

    # Networks enabled in a fresh filter state
    DEFAULT_NETWORKS: list[str] = ["sepolia"]

    # App
    APP_NAME: str = "NFT Marketplace Engine"
    DEBUG: bool = False


settings = Settings()
