from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    SECRET_KEY: str = ""
    SEARCH_API_URL: str = "http://localhost:5000"

    HTTP_CONNECT_TIMEOUT: float = 3.0
    HTTP_READ_TIMEOUT: float = 5.0

    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "DEBUG"

    REJECT_EMPTY_QUERY: bool = False

    UI_HOST: str = "0.0.0.0"
    UI_PORT: int = 8501

    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )


settings = Settings()
