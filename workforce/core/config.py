# workforce/core/config.py
from datetime import time

from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./workforce.db"
    AUTO_CREATE_TABLES: bool = True

    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Check-ins strictly after this local time are late.
    LATE_CUTOFF: time = time(9, 0)

    LOG_LEVEL: str = "INFO"

    HOST: str = "127.0.0.1"
    PORT: int = 8000

    SEED_ADMIN_EMAIL: str = "admin@workforce.io"
    SEED_ADMIN_PASSWORD: str = "Admin@12345"


settings = Settings()
