from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Dict, Optional

API_HOSTS: Dict[str, str] = {
    "production": "https://api.familysearch.org",
    "beta": "https://apibeta.familysearch.org",
    "integration": "https://api-integ.familysearch.org",
}

class Settings(BaseSettings):
    FS_ENVIRONMENT: str = Field("integration", description="production, beta or integration")
    FS_BASE_URL: Optional[str] = Field(None, description="Overrides the host derived from FS_ENVIRONMENT")
    FS_ACCESS_TOKEN: Optional[str] = Field(None, description="OAuth2 access token obtained elsewhere")
    FS_CLIENT_ID: Optional[str] = Field(None, description="FamilySearch app key")
    USER_AGENT: str = "fs-sources/0.1"
    LOG_LEVEL: str = "INFO"

    # HTTP transport
    HTTP_TIMEOUT: float = Field(30.0, description="Per-request timeout in seconds")
    HTTP_MAX_RETRIES: int = Field(3, description="Attempts on connection errors")
    HTTP_RETRY_WAIT: float = Field(2.0, description="Seconds between attempts")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def api_base_url(self) -> str:
        if self.FS_BASE_URL:
            return self.FS_BASE_URL.rstrip("/")
        return API_HOSTS.get(self.FS_ENVIRONMENT.lower(), API_HOSTS["integration"])

@lru_cache()
def get_settings() -> Settings:
    return Settings()
