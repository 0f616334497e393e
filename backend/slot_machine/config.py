"""Application configuration with defaults and environment overrides."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Slot machine settings. Every field can be overridden via SLOT_* env vars."""

    model_config = SettingsConfigDict(env_prefix="SLOT_")

    # Runtime
    debug: bool = False
    log_level: str = "INFO"
    redis_url: str = "redis://localhost:6379/0"

    # Protocol
    protocol_version: str = "1.0"

    # New game defaults
    initial_credits: int = 1000
    bet_size: int = 1
    bet_min: int = 1
    bet_max: int = 10

    # Rungs used by BET PLUS / BET MINUS
    bet_ladder: list[int] = [1, 2, 3, 5, 10]

    # Pause between spins of AUTOSPIN
    autospin_delay_seconds: float = 1.0

    # Redis TTLs
    session_ttl_seconds: int = 86400  # 24 hours
    lock_ttl_seconds: int = 30  # Auto-expire lock if the process dies mid-spin


settings = Settings()
