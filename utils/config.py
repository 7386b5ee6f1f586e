# utils/config.py - Application configuration
import os
import logging

logger = logging.getLogger(__name__)


def _get_int(name, default):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using {default}")
        return default


class Config:
    """Settings read from the environment"""

    def __init__(self):
        self.API_BASE_URL = os.getenv("INVENTORY_API_URL", "http://localhost:8081").rstrip("/")
        self.API_TIMEOUT = _get_int("INVENTORY_API_TIMEOUT", 10)
        self.CACHE_TTL = _get_int("CACHE_TTL", 300)
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")
        self.LOW_STOCK_THRESHOLD = _get_int("LOW_STOCK_THRESHOLD", 10)
        self.APP_TITLE = os.getenv("APP_TITLE", "Inventory & Production")

    def __repr__(self):
        return f"Config(API_BASE_URL={self.API_BASE_URL!r}, API_TIMEOUT={self.API_TIMEOUT})"


config = Config()
