"""
Provider Interfaces Module
Capabilities every game provider exposes.
"""

from abc import ABC, abstractmethod

from .models import GameInfo, GameResult, SearchPage


class GameProvider(ABC):
    """Minimal provider: search plus detail lookup"""

    def __init__(self, base_url: str, name: str, class_path: str):
        self.base_url = base_url.rstrip('/')
        self.name = name
        self.class_path = class_path

    @abstractmethod
    def search(self, query: str, page: int = 1) -> SearchPage[GameResult]:
        """Search for games"""

    @abstractmethod
    def fetch_game_info(self, game_id: str) -> GameInfo:
        """Get detailed game information from an id or URL"""

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name} ({self.base_url})>"


class GameCatalogProvider(GameProvider):
    """Provider that also serves the curated catalogue listings"""

    @abstractmethod
    def fetch_new_and_popular(self, page: int = 1) -> SearchPage[GameResult]:
        pass

    @abstractmethod
    def fetch_top_sellers(self, page: int = 1) -> SearchPage[GameResult]:
        pass

    @abstractmethod
    def fetch_top_rated(self, page: int = 1) -> SearchPage[GameResult]:
        pass

    @abstractmethod
    def fetch_newest(self, page: int = 1) -> SearchPage[GameResult]:
        pass
