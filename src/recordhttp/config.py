from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    REDIS_URL: str = "redis://localhost:6379/0"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"  # relative to the working directory of the worker/API
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
BROKER_URL = settings.REDIS_URL
RESULT_BACKEND = settings.REDIS_URL
