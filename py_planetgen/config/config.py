from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Engine settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PLANETGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (e.g., plain, json)")

    # World Configuration
    world_min_y: int = Field(default=-64, description="Lowest vertical slot of a terrain column")
    world_max_y: int = Field(default=319, description="Highest vertical slot of a terrain column")
    default_sea_level: int = Field(default=62, description="Sea level for archetypes without their own")

    # Biome Selection
    biome_noise_scale: float = Field(
        default=0.0008, gt=0, description="Spatial frequency of the biome selector noise"
    )
    min_biome_weight: float = Field(
        default=0.5, gt=0, description="Weight floor for every biome that passes its gate"
    )

    # Fallback Terrain
    fallback_surface_height: int = Field(
        default=64, description="Surface height of the flat column built without a model"
    )


# Instantiate singleton settings object
settings = Settings()
