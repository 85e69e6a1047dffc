"""Runtime configuration for blockstage."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="BLOCKSTAGE_", env_file=".env", extra="ignore")

    app_name: str = "blockstage"
    log_level: str = "INFO"
    time_scale: float = Field(
        default=1.0,
        ge=0.0,
        description="Multiplier applied to every nominal wait; 0 runs scripts instantly.",
    )
    rng_seed: int | None = Field(default=None, description="Seed for target respawn positions.")
    theme_id: int = Field(default=1, description="Theme selected when a session starts.")


settings = Settings()
