from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App config
    app_name: str = "Codivio Gateway"
    debug: bool = False
    log_level: str = "INFO"

    # Upstream services
    user_service_url: str = "http://localhost:8081"
    project_service_url: str = "http://localhost:8082"

    # CORS
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
