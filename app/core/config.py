import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    UPSTREAM_BASE_URL: str = "http://localhost:8112/api/v1/employee"
    UPSTREAM_TIMEOUT_SECONDS: float = 30.0
    UPSTREAM_POOL_SIZE: int = 100

    JWT_SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    AUTH_USERNAME: str = "admin"
    AUTH_PASSWORD: str = "password"

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
