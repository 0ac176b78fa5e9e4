from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Comma-separated allow-list, empty means every origin is allowed
    CORS_ORIGINS: str = ""

    # Search configuration
    DEFAULT_LIMIT: int = Field(10, ge=1)
    MAX_LIMIT: int = Field(50, ge=1)
    DETAIL_TIMEOUT_SECONDS: float = 10.0
    REQUEST_TIMEOUT_SECONDS: float = 15.0

    # Scraping client
    SOUNDCLOUD_CLIENT_ID: str = ""
    SOUNDCLOUD_API_BASE: str = "https://api-v2.soundcloud.com"
    SOUNDCLOUD_WEB_URL: str = "https://soundcloud.com"
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    DEVELOPER: str = "Ehsan Fazeli"

    @model_validator(mode="after")
    def check_limits(self) -> "Settings":
        if self.DEFAULT_LIMIT > self.MAX_LIMIT:
            raise ValueError(
                f"DEFAULT_LIMIT ({self.DEFAULT_LIMIT}) must not exceed MAX_LIMIT ({self.MAX_LIMIT})"
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]

    @property
    def allow_all_origins(self) -> bool:
        return self.cors_origins == ["*"]

    class Config:
        env_file = ".env"
        extra = "allow"


# Global settings instance
settings = Settings()
