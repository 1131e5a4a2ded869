"""
Centralized configuration using pydantic-settings.
Loads from .env file and provides typed access to all constants.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class ChemistrySettings(BaseSettings):
    """Roast kinetics and cupping parameters."""

    step_seconds: int = Field(default=10, description="Length of one integration step (simulated seconds)")
    intensity_scale: float = Field(default=1000.0, description="Concentration (mg/kg) at which a compound saturates")
    default_archetype: str = Field(default="arabica")
    default_moisture: float = Field(default=12.0, description="Green bean moisture, percent")
    defect_penalty: int = Field(default=2, description="Score points deducted per defect")

    model_config = {"env_prefix": "CHEM_", "env_file": ".env", "extra": "ignore"}


class CustomerSettings(BaseSettings):
    """Preference evolution and personality adaptation parameters."""

    history_limit: int = Field(default=20, description="Max preference/adaptation history entries")
    drift_interval_days: float = Field(default=7.0, description="Days between natural preference drift steps")
    adaptation_cooldown_days: float = Field(default=1.0, description="Min days between personality adaptations")
    evolution_rate_min: float = Field(default=0.01)
    evolution_rate_max: float = Field(default=0.05)
    rng_seed: Optional[int] = Field(default=None, description="Seed for the shared random source (None = unseeded)")

    model_config = {"env_prefix": "CUSTOMER_", "env_file": ".env", "extra": "ignore"}


class PathSettings(BaseSettings):
    """File path configuration."""

    project_root: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent
    )
    customer_data_dir: Optional[Path] = Field(
        default=None,
        description="Customer state directory (overrides the default under data/)"
    )

    @property
    def data_dir(self) -> Path:
        if self.customer_data_dir is not None:
            return self.customer_data_dir
        return self.project_root / "data" / "customers"

    @property
    def output_dir(self) -> Path:
        return self.project_root / "data" / "output"

    model_config = {"env_prefix": "PATH_", "env_file": ".env", "extra": "ignore"}


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="[%(levelname)s] %(message)s")

    model_config = {"env_prefix": "LOG_", "env_file": ".env", "extra": "ignore"}


class Settings(BaseSettings):
    """Root settings aggregator."""

    chemistry: ChemistrySettings = Field(default_factory=ChemistrySettings)
    customer: CustomerSettings = Field(default_factory=CustomerSettings)
    paths: PathSettings = Field(default_factory=PathSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
