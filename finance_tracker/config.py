from dotenv import load_dotenv
from pydantic import BaseModel
import os

# Load .env before reading any setting
load_dotenv()


SUPPORTED_CURRENCIES = ("RON", "EUR", "USD", "GBP")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./finance_tracker.db")
    sql_echo: bool = _env_flag("SQL_ECHO")
    jwt_secret: str = os.getenv("JWT_SECRET", "change-me")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = _env_flag("LOG_JSON")
    default_currency: str = os.getenv("DEFAULT_CURRENCY", "RON")


# Global settings instance
settings = Settings()
