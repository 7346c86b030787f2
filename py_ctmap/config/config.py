from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Load .env for local/dev environments only for values missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CTMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: str = Field(default="*", description="Comma-separated CORS allowed origins")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Map Layout Configuration
    default_container_width: float = Field(default=800, gt=0, description="Container width when none is given")
    max_map_height: float = Field(default=500, gt=0, description="Cap on the map height in pixels")
    aspect_ratio: float = Field(default=0.75, gt=0, description="Map height as a fraction of its width")
    margin: float = Field(default=20, ge=0, description="Plot margin on every side in pixels")

    # Heatmap Configuration
    grid_size: float = Field(default=30, gt=0, description="Heatmap cell size in pixels")
    influence_fraction: float = Field(
        default=0.3, gt=0, description="Heatmap cutoff as a fraction of the plot diagonal"
    )

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


# Instantiate singleton settings object
settings = Settings()
