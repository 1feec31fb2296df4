"""
Configuration module for Pastebox.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
        self.DEBUG: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
        self.APP_DOMAIN: str = os.getenv("APP_DOMAIN", "http://localhost:8000")
        self.TITLE: str = os.getenv("PASTEBOX_TITLE", "pastebox")
        self.RENDER_CACHE_SIZE: int = int(os.getenv("RENDER_CACHE_SIZE", "128"))


settings = Settings()
