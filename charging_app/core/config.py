from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    DATABASE_URL: str = "sqlite:///./charging_stations.db"
    API_PREFIX: str = "/api"

    # separados por coma, "*" permite cualquier origen
    ALLOWED_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # cliente
    API_BASE_URL: str = "http://localhost:8000/api"
    CLIENT_TIMEOUT: float = 10.0
    CLIENT_STATE_FILE: str = "~/.charging_app/client.json"
    TICK_SECONDS: float = 1.0


settings = Settings()
