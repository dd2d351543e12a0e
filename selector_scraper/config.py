"""Configuration settings for the selector scraping service."""

import os


class Settings:
    """Application settings."""

    # API settings
    API_TITLE = "Selector Scraping API"
    API_VERSION = "0.1.0"
    DEBUG = False
    CORS_ORIGINS = ["http://localhost:3000"]

    # Playwright settings
    PAGE_TIMEOUT_MS = 1000  # default timeout of every page operation
    PLAYWRIGHT_LAUNCH_ARGS = {
        "headless": True,
        "args": ["--no-sandbox", "--disable-setuid-sandbox"],
    }

    # Scraping settings
    PAGE_SETTLE_MS = 500  # pause once the page is loaded
    CLICK_SETTLE_MS = 500  # pause after each successful click
    CACHE_DIR = "./.cache"
    SCREENSHOT_DIR = "."

    # Security settings
    MAX_URL_LENGTH = 2048
    ALLOWED_SCHEMES = {"http", "https"}

    def __init__(self):
        """Initialize settings from environment variables."""
        self.DEBUG = os.getenv("SCRAPER_DEBUG", "false").lower() == "true"
        self.PAGE_TIMEOUT_MS = int(
            os.getenv("SCRAPER_PAGE_TIMEOUT_MS", str(self.PAGE_TIMEOUT_MS))
        )
        self.CACHE_DIR = os.getenv("SCRAPER_CACHE_DIR", self.CACHE_DIR)
        self.SCREENSHOT_DIR = os.getenv("SCRAPER_SCREENSHOT_DIR", self.SCREENSHOT_DIR)

        origins = os.getenv("SCRAPER_CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]


settings = Settings()
