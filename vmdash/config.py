from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "VM Dashboard API"
    app_version: str = "0.1.0"
    env: str = "development"
    debug: bool = False

    # No default: a missing DATABASE_URL is reported as a configuration error
    database_url: str | None = None
    seed_demo_data: bool = False

    # Used by VMStore when it builds its own HTTP client
    api_base_url: str = "http://localhost:8000/api"
    api_timeout_s: float = 10.0


settings = Settings()
