from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv(".env.local")

class Settings(BaseSettings):
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    DEFAULT_TAX_RATE: float = 10.0
    DEFAULT_DUE_DAYS: int = 14
    CURRENCY_SYMBOL: str = "$"
    SEED_FILE: str | None = None
    LOG_LEVEL: str = "INFO"

settings = Settings()
