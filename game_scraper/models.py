"""
Data Models Module
Immutable records produced by the scraper for listing, detail and search pages.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Generic, Optional, Tuple, TypeVar

T = TypeVar('T')


class Platform(str, Enum):
    """Platforms a game can be published for"""
    WINDOWS = 'Windows'
    MAC = 'macOS'
    LINUX = 'Linux'
    ANDROID = 'Android'
    WEB = 'Web'
    IOS = 'iOS'


class Genre(str, Enum):
    """Genre labels used by the marketplace"""
    ACTION = 'Action'
    ADVENTURE = 'Adventure'
    PUZZLE = 'Puzzle'
    STRATEGY = 'Strategy'
    SIMULATION = 'Simulation'
    RPG = 'RPG'
    PLATFORMER = 'Platformer'
    FIGHTING = 'Fighting'
    RACING = 'Racing'
    SPORTS = 'Sports'
    HORROR = 'Horror'
    VISUAL_NOVEL = 'Visual Novel'
    EDUCATIONAL = 'Educational'
    MUSIC = 'Music'
    ARCADE = 'Arcade'

    @classmethod
    def lookup(cls, label: str) -> Optional['Genre']:
        """Map a free-text genre label onto a known genre, case-insensitively"""
        wanted = ' '.join(label.split()).lower()
        for genre in cls:
            if genre.value.lower() == wanted:
                return genre
        return None


class VideoType(str, Enum):
    TRAILER = 'trailer'
    GAMEPLAY = 'gameplay'
    OTHER = 'other'


def _serialize(value: Any) -> Any:
    """Convert model values into JSON-friendly primitives"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    return value


class _Record:
    """Mixin giving dataclass records a to_dict() export"""

    def to_dict(self) -> dict:
        return {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class Price(_Record):
    """
    A parsed price.

    Attributes:
        amount: Numeric value of the price
        currency: Currency code, always USD for this marketplace
        formatted: The trimmed price text as it appeared on the page
    """

    amount: float
    currency: str
    formatted: str


@dataclass(frozen=True)
class GameVideo(_Record):
    """An embedded video found on a detail page"""

    url: str
    type: VideoType = VideoType.TRAILER
    thumbnail: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class GameResult(_Record):
    """
    One entry of a listing or search results page.

    Attributes:
        id: Identifier derived from the last path segment of url
        title: Game title, never empty
        url: Absolute URL of the detail page, never empty
        image: Thumbnail URL if the listing shows one
        price: Parsed price, None when the game is free
        is_free: True exactly when price is None
        platforms: Platforms advertised by the listing icons
        developer: Author name shown on the listing
    """

    id: str
    title: str
    url: str
    image: Optional[str] = None
    price: Optional[Price] = None
    is_free: bool = True
    platforms: Tuple[Platform, ...] = ()
    developer: Optional[str] = None

    def __post_init__(self):
        if not self.title or not self.url:
            raise ValueError("GameResult requires a title and a url")
        if self.is_free != (self.price is None):
            raise ValueError("is_free must be True exactly when price is missing")


@dataclass(frozen=True)
class GameInfo(_Record):
    """Full metadata of a single game, built from its detail page"""

    id: str
    title: str
    url: str
    image: Optional[str] = None
    cover: Optional[str] = None
    description: Optional[str] = None
    genres: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    price: Optional[Price] = None
    is_free: bool = True
    is_on_sale: bool = False
    original_price: Optional[Price] = None
    platforms: Tuple[Platform, ...] = ()
    release_date: Optional[str] = None
    rating: Optional[float] = None
    rating_count: Optional[int] = None
    developer: Optional[str] = None
    publisher: Optional[str] = None
    screenshots: Tuple[str, ...] = ()
    videos: Tuple[str, ...] = ()
    video_details: Tuple[GameVideo, ...] = ()

    def __post_init__(self):
        if not self.title or not self.url:
            raise ValueError("GameInfo requires a title and a url")
        if self.is_free != (self.price is None):
            raise ValueError("is_free must be True exactly when price is missing")


@dataclass(frozen=True)
class SearchPage(_Record, Generic[T]):
    """
    A page of results with best-effort pagination info.

    None in any pagination field means "unknown", not an error.
    """

    results: Tuple[T, ...] = ()
    current_page: Optional[int] = None
    has_next_page: Optional[bool] = None
    total_pages: Optional[int] = None
    total_results: Optional[int] = None
