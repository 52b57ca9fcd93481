import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    you_api_key: str = os.getenv("YOU_API_KEY", "")
    you_api_base: str = os.getenv("YOU_API_BASE", "https://api.you.com")
    locationiq_api_key: str = os.getenv("LOCATIONIQ_API_KEY", "")
    locationiq_base_url: str = os.getenv("LOCATIONIQ_BASE_URL", "https://us1.locationiq.com/v1")

    search_timeout_seconds: float = float(os.getenv("SEARCH_TIMEOUT_SECONDS", "15"))
    geocode_timeout_seconds: float = float(os.getenv("GEOCODE_TIMEOUT_SECONDS", "10"))
    # LocationIQ free tier allows 2 requests per second
    geocode_rate_limit_calls: int = int(os.getenv("GEOCODE_RATE_LIMIT_CALLS", "2"))
    geocode_rate_limit_period: float = float(os.getenv("GEOCODE_RATE_LIMIT_PERIOD", "1.0"))

    average_speed_kmh: float = float(os.getenv("AVERAGE_SPEED_KMH", "50"))
    max_candidates: int = int(os.getenv("MAX_CANDIDATES", "10"))
    max_suggestions: int = int(os.getenv("MAX_SUGGESTIONS", "5"))
    preference_window: int = int(os.getenv("PREFERENCE_WINDOW", "20"))

    mongodb_uri: str = os.getenv("MONGODB_URI", "")
    database_name: str = os.getenv("DATABASE_NAME", "planpal_db")
    allowed_origins: str = os.getenv("ALLOWED_ORIGINS", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def get_settings() -> Settings:
    return Settings()
