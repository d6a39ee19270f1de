"""Application configuration."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """KMS settings loaded from environment variables (prefix ``KMS_``)."""

    # Environment; "production" makes create_kms() warn about software providers
    environment: str = "development"  # development, staging, production

    # Built-in key providers registered by create_kms(), comma-separated
    # (e.g. "Ed25519,Secp256k1")
    providers: str = "Ed25519,Secp256k1"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_prefix="KMS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def provider_list(self) -> list[str]:
        """Provider names with blanks removed."""
        return [item.strip() for item in self.providers.split(",") if item.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
