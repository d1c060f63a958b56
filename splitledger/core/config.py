from decimal import Decimal
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "SplitLedger"
    DATABASE_URL: str = "sqlite+aiosqlite:///./splitledger.db"
    DB_CONNECT_RETRIES: int = 5
    SETTLEMENT_THRESHOLD: Decimal = Decimal("0.01")
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
