"""Configuration management."""
import os
from dotenv import load_dotenv

from bookfinder.exceptions import ConfigurationError

# Load environment variables
load_dotenv()

SUPPORTED_LANGUAGES = {
    "es": "Español",
    "en": "English",
    "fr": "Français",
    "de": "Deutsch",
}


class Config:
    """Application configuration."""

    # Credentials
    GOOGLE_BOOKS_API_KEY = os.getenv("GOOGLE_BOOKS_API_KEY")
    AMAZON_TAG = os.getenv("AMAZON_TAG")

    # Defaults
    DEFAULT_TIMEOUT = int(os.getenv("DEFAULT_TIMEOUT", "10"))
    DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "es")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    def validate(self):
        """Raise ConfigurationError if any credential is missing."""
        missing = [
            name for name in ("GOOGLE_BOOKS_API_KEY", "AMAZON_TAG")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(missing)
