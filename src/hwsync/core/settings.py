"""Environment settings - loads NetBox credentials and controller tuning from .env.

Priority:
1. Environment variables (highest priority)
2. .env file values
3. Default values in this file

The settings object is built once at startup (see ``load_settings``) and
handed to the components that need it. Nothing in hwsync reads a
module-level settings instance.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hwsync.core.errors import ConfigError

# Project root: src/hwsync/core/settings.py -> src/hwsync/core/ -> src/hwsync/ -> src/ -> project_root/
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"


class EnvSettings(BaseSettings):
    """Environment variables for NetBox access and reconcile behaviour."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================
    # NetBox (inventory service)
    # ============================================
    netbox_url: str = ""
    netbox_token: str = ""
    netbox_verify_ssl: bool = True
    netbox_timeout: float = 30.0
    netbox_page_limit: int = 1000

    # ============================================
    # Reconcile policy
    # ============================================
    expected_platform: str = "Linux KVM"
    updates_file: str = "config/updates.yaml"
    dry_run: bool = False

    # ============================================
    # Scheduling (seconds)
    # ============================================
    reconcile_interval: float = Field(default=300.0, gt=0)
    rate_limiter_burst: int = Field(default=200, ge=1)
    rate_limiter_frequency: float = Field(default=30.0, gt=0)
    failure_base_delay: float = Field(default=1.0, gt=0)
    failure_max_delay: float = Field(default=1000.0, gt=0)
    max_concurrent_reconciles: int = Field(default=1, ge=1)
    trigger_buffer_size: int = Field(default=1, ge=1)

    # ============================================
    # Logging
    # ============================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file_enabled: bool = False
    log_file_path: str = "logs/hwsync.log"
    log_file_max_size_mb: int = 10
    log_file_backup_count: int = 5

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        """Accept lower-case log levels from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("netbox_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def validate_required(self) -> None:
        """Raise ConfigError if anything needed to talk to NetBox is missing."""
        if not self.netbox_url:
            raise ConfigError("netbox URL is required")
        if not self.netbox_token:
            raise ConfigError("netbox token is required")
        if not self.expected_platform:
            raise ConfigError("expected platform name is required")
        if self.failure_base_delay > self.failure_max_delay:
            raise ConfigError("failure base delay must not exceed failure max delay")

    def get_path(self, value: str) -> Path:
        """Resolve a configured path relative to the project root."""
        path = Path(value)
        if path.is_absolute():
            return path
        return PROJECT_ROOT / path


def load_settings(**overrides) -> EnvSettings:
    """Build the process-wide settings object.

    Keyword overrides win over environment and .env values; the CLI uses
    them for command-line flags.
    """
    return EnvSettings(**{k: v for k, v in overrides.items() if v is not None})
