"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """dpfilter configuration — loaded from env vars / .env file."""

    filter_file: str = Field(default="", description="Default JSON rule file for `dpfilter match`")
    log_level: str = Field(default="WARNING", description="Root logging level (DEBUG|INFO|WARNING|ERROR)")
    default_output: str = Field(default="table", description="Default output format (table|json)")

    class Config:
        env_prefix = "DPFILTER_"
        env_file = ".env"


settings = Settings()
