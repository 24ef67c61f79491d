"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Ticket gate application settings."""

    # App
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_debug: bool = True
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"

    # CrossFi ledger
    ledger_rpc_url: str = "https://rpc.testnet.ms"
    ledger_chain_id: int = 4157
    ledger_timeout_seconds: float = 5.0
    event_manager_address: str = ""  # empty -> stub ledger

    # Ticket access challenge
    challenge_window_seconds: int = 300
    challenge_allow_future: bool = True

    # Event catalogue
    max_event_scan: int = 100

    # CORS
    cors_origins: str = "*"  # Comma-separated origins; "*" for dev only

    # Rate Limiting (requests per minute, per client IP)
    rate_limit_anonymous: int = 60

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"

    @property
    def ledger_configured(self) -> bool:
        """True when an EventManager contract address has been provided."""
        return bool(self.event_manager_address.strip())

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


def get_settings() -> Settings:
    """Return a fresh settings instance."""
    return Settings()
