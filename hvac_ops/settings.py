"""
Application settings, read from the environment and an optional .env file.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .sheets.config import SheetsConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Apps Script web app URL; empty means "not connected"
    HVAC_SHEETS_ENDPOINT_URL: Optional[str] = None
    # Same value under the name the web front-end uses
    VITE_GOOGLE_SCRIPT_URL: Optional[str] = None
    HVAC_SHEETS_TIMEOUT: float = 30.0

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Where the session user and company profile are kept
    HVAC_STATE_DIR: Path = Field(default_factory=lambda: Path.home() / ".hvac_ops")

    @property
    def endpoint_url(self) -> Optional[str]:
        url = self.HVAC_SHEETS_ENDPOINT_URL or self.VITE_GOOGLE_SCRIPT_URL
        return url.strip() if url and url.strip() else None

    def sheets_config(self) -> SheetsConfig:
        return SheetsConfig(endpoint_url=self.endpoint_url, timeout=self.HVAC_SHEETS_TIMEOUT)
