# prr_engine/config/settings.py

from datetime import date
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "prr-engine"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Case identity ---
    case_environment_tag: str = "PHILLIPSTON"
    case_module_tag: str = "PRR"
    case_id_prefix: str = "PRR"
    case_id_max_attempts: int = Field(5, ge=1)

    # --- Vault ---
    # Default to TEST until explicitly switched.
    vault_mode: Literal["test", "prod"] = "test"
    library_root: str = "PublicLogic Vault"

    # --- Calendar ---
    # Empty by default: state holidays are not built in.
    holidays: List[date] = Field(default_factory=list)

    # --- Storage ---
    case_store: Literal["redis", "database"] = "redis"
    redis_url: str = "redis://localhost:6379/0"
    database_url: Optional[str] = None
    key_prefix: str = "publiclogic"

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def store_namespace(self) -> str:
        """Key namespace so TEST and PROD vault data never mix."""
        return f"{self.key_prefix}:{self.vault_mode}:{self.case_environment_tag.lower()}:{self.case_module_tag.lower()}"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
