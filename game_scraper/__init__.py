"""Game Scraper Package
Scrapes game listings and game pages from the itch.io marketplace into typed
records, with a REST API on top."""

__version__ = "1.0.0"

# Import the provider interfaces and the concrete itch.io provider
from .base_scraper import GameProvider, GameCatalogProvider
from .itch_scraper import ItchScraper
# Import configuration management from the config module
from .config import Config
from .exceptions import GameScraperError, TransportError, ScraperError, InvalidQueryError
from .http_client import HttpClient
from .models import (
    GameInfo,
    GameResult,
    GameVideo,
    Genre,
    Platform,
    Price,
    SearchPage,
    VideoType,
)

# Providers grouped by the kind of catalogue they serve
GAMES = {
    "ItchIO": ItchScraper,
}

# Define public API by listing all symbols that should be imported when using 'from package import *'
__all__ = [
    "GAMES",
    "GameProvider",
    "GameCatalogProvider",
    "ItchScraper",
    "Config",
    "HttpClient",
    "GameScraperError",
    "TransportError",
    "ScraperError",
    "InvalidQueryError",
    "GameInfo",
    "GameResult",
    "GameVideo",
    "Genre",
    "Platform",
    "Price",
    "SearchPage",
    "VideoType",
]
