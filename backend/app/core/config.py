from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    GEMINI_API_KEY: str | None = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/models/"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    # None means no deadline on the provider call
    GEMINI_TIMEOUT: float | None = None

    HOST: str = "0.0.0.0"
    PORT: int = 3001

    CORS_ORIGIN: str = "http://localhost:3000"
    CORS_METHODS: List[str] = ["GET", "POST", "PUT", "DELETE"]
    CORS_HEADERS: List[str] = ["Content-Type", "Authorization"]

    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"


settings = Settings()
