import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./habitkit.db")
    AUTO_CREATE_SCHEMA: bool = os.getenv("AUTO_CREATE_SCHEMA", "0") == "1"
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sql").strip().lower()
    STORAGE_KEY: str = os.getenv("STORAGE_KEY", "@habits_data").strip() or "@habits_data"
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "").strip()
    DEFAULT_HABIT_COLOR: str = os.getenv("DEFAULT_HABIT_COLOR", "#4ADE80").strip()
    TIME_TOTALS_WEEKS: int = int(os.getenv("TIME_TOTALS_WEEKS", "20"))
    MAX_WINDOW_WEEKS: int = int(os.getenv("MAX_WINDOW_WEEKS", "520"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    LOG_FILE: str = os.getenv("LOG_FILE", "").strip()
    CORS_ORIGINS: list[str] = [
        item.strip()
        for item in os.getenv("CORS_ORIGINS", "*").split(",")
        if item.strip()
    ]


settings = Settings()
