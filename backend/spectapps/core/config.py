from pydantic import validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "SpectApps Video API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./spectapps.db"

    # Replicate
    REPLICATE_API_TOKEN: str = ""
    REPLICATE_BASE_URL: str = "https://api.replicate.com/v1"
    REPLICATE_MODEL: str = "kwaivgi/kling-v2.1-master"
    REPLICATE_REQUEST_TIMEOUT: int = 60

    # Video Generation
    VIDEO_ASPECT_RATIO: str = "9:16"
    POLL_INTERVAL_SECONDS: float = 3.0
    HISTORY_LIMIT: int = 10

    @validator("POLL_INTERVAL_SECONDS")
    def check_poll_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError("POLL_INTERVAL_SECONDS must not be negative")
        return v

    @validator("LOG_LEVEL")
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
