from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Helius (Solana RPC)
    helius_api_key: str = ""
    helius_rpc_url: str = ""
    helius_max_rps: float = 10.0

    # Solana RPC (fallback if helius_rpc_url is empty and no key is set)
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"

    # Solscan Pro API (holders, token meta, account transactions)
    solscan_api_url: str = "https://pro-api.solscan.io/v2.0"
    solscan_api_key: str = ""
    solscan_max_rps: float = 5.0

    # Jupiter token list (identity)
    jupiter_token_url: str = "https://lite-api.jup.ag/tokens/v1/token"
    jupiter_max_rps: float = 1.0

    # DexScreener (liquidity, market data, pair creation)
    dexscreener_max_rps: float = 4.0

    # Raydium v3 pool index
    raydium_max_rps: float = 5.0

    # Rugcheck.xyz (external audit signal)
    enable_rugcheck: bool = True
    rugcheck_max_rps: float = 2.0

    # Timeouts (seconds)
    provider_timeout_sec: float = 10.0  # single upstream call
    facet_timeout_sec: float = 30.0  # whole fallback chain of one facet
    request_timeout_sec: float = 45.0  # whole aggregation

    # Age resolution
    rpc_signature_page_limit: int = 1000
    rpc_signature_max_pages: int = 5
    default_age_days: float = 60.0

    # Holders
    holder_list_limit: int = 10
    allow_synthetic_holders: bool = False  # local testing only

    # Vetting
    tiers_config_path: str = str(CONFIG_DIR / "tiers.json")
    batch_max_size: int = 20
    batch_concurrency: int = 20

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_rate_limit: str = "30/minute"
    api_batch_rate_limit: str = "5/minute"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_dir: str = "logs"

    @property
    def rpc_url(self) -> str:
        """Helius RPC when configured, otherwise the public Solana RPC."""
        if self.helius_rpc_url:
            return self.helius_rpc_url
        if self.helius_api_key:
            return f"https://mainnet.helius-rpc.com/?api-key={self.helius_api_key}"
        return self.solana_rpc_url


settings = Settings()
