"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (console or json)")

    # Map Generation Configuration
    default_map_width: int = Field(default=800, description="Default map width")
    default_map_height: int = Field(default=600, description="Default map height")
    max_map_width: int = Field(default=2000, description="Max allowed map width")
    max_map_height: int = Field(default=2000, description="Max allowed map height")

    # Export Configuration
    output_dir: str = Field(default="./maps", description="Directory for exported maps")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
