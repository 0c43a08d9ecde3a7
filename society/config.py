import os
import logging
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Database Configuration
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASS = os.getenv("DB_PASS", "postgres")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME")

    @property
    def DATABASE_URL(self):
        # Explicit URL wins (SQLite for local runs and tests)
        url = os.getenv("DATABASE_URL")
        if url:
            return url

        if self.DB_NAME:
            return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

        return "sqlite+aiosqlite:///society.db"

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Create demo towers/flats/expenses on startup when the store is empty
    SEED_ON_START = _env_bool("SEED_ON_START", True)

    # mark_paid rejects a bill that belongs to a different flat
    VERIFY_BILL_OWNERSHIP = _env_bool("VERIFY_BILL_OWNERSHIP", True)

    # Display value for the budget heuristic; not a statistical metric
    PREDICTION_CONFIDENCE = float(os.getenv("PREDICTION_CONFIDENCE", "90"))

    # Fee increases suggested by the budget heuristic (rupees)
    LARGE_FEE_INCREASE = int(os.getenv("LARGE_FEE_INCREASE", "200"))
    SMALL_FEE_INCREASE = int(os.getenv("SMALL_FEE_INCREASE", "100"))

config = Config()

logging.info(f"Database: {config.DATABASE_URL.split('@')[1] if '@' in config.DATABASE_URL else 'SQLite'}")
