"""
itch.io Scraper Module
Fetches itch.io listing, search and game pages and turns them into typed records.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlencode

from bs4 import BeautifulSoup, Tag

from .utils.parser_utils import (
    clean_text,
    element_attr,
    extract_id_from_url,
    first_attr,
    first_text,
    parse_number,
    parse_platforms,
    parse_price,
    parse_rating,
    to_absolute_url,
)

from .base_scraper import GameCatalogProvider
from .config import Config
from .exceptions import InvalidQueryError, ScraperError, TransportError
from .http_client import HttpClient
from .models import GameInfo, GameResult, GameVideo, Genre, SearchPage, VideoType

# Listing pages
SEARCH_CELL_SELECTOR = '.game_cell'
CATEGORY_CELL_SELECTOR = '.game_cell, .game_cell_data'
CELL_TITLE_SELECTOR = '.game_title, .title'
CELL_LINK_SELECTOR = '.game_link, a'
CELL_IMAGE_SELECTOR = '.game_thumb img, img'
CELL_PRICE_SELECTOR = '.price, .game_price'
CELL_DEVELOPER_SELECTOR = '.game_author, .author'
PAGER_LABEL_SELECTOR = '.pager_label'
NEXT_PAGE_SELECTOR = '.next_page'
PAGER_PATTERN = re.compile(r'Page\s+(\d+)\s+of\s+(\d+)', re.IGNORECASE)

# Game pages
TITLE_SELECTOR = '.game_title'
DESCRIPTION_SELECTOR = '.formatted_description, .user_formatted'
DESCRIPTION_BLOCKS = ['p', 'li', 'h1', 'h2', 'h3', 'h4', 'blockquote', 'pre']
DEVELOPER_SELECTOR = '.game_author a, .user_name'
COVER_SELECTOR = '.game_thumb img, .header_image img, .cover_image img'
GENRE_SELECTOR = '.game_genre, .genre_tag, .classification_tag'
TAG_SELECTOR = '.game_tag_link, .tag'
PRICE_SELECTOR = '.buy_btn .price, .price'
ORIGINAL_PRICE_SELECTOR = '.original_price'
SCREENSHOT_SELECTOR = '.screenshot img, .screenshot_list img'
VIDEO_SELECTORS = [
    'iframe[src*="youtube.com"], iframe[src*="youtu.be"]',
    'iframe[src*="vimeo.com"]',
]
RATING_SELECTOR = '.aggregate_rating, .rating_value'
RATING_COUNT_SELECTOR = '.rating_count'
RELEASE_DATE_SELECTOR = '.game_info_panel_widget abbr, .release_date abbr'
INFO_PANEL_ROW_SELECTOR = '.game_info_panel_widget tr'
OG_IMAGE_SELECTOR = 'meta[property="og:image"]'
OG_TITLE_SELECTOR = 'meta[property="og:title"]'

IMAGE_ATTRS = ('src', 'data-lazy_src', 'data-src')


class ItchScraper(GameCatalogProvider):
    """Scraper for the itch.io game marketplace"""

    def __init__(self, config: Optional[Config] = None, http_client: Optional[HttpClient] = None):
        self.config = config or Config()
        super().__init__(self.config.base_url, 'ItchIO', 'GAMES')
        self.logger = logging.getLogger(__name__)

        # Transport bound to the marketplace origin
        self.http_client = http_client or HttpClient(
            self.base_url,
            timeout=self.config.request_timeout,
            headers=self.config.get_headers(),
        )

    # ------------------------------------------------------------------
    # Public operations

    def fetch_new_and_popular(self, page: int = 1) -> SearchPage[GameResult]:
        return self._fetch_by_category('new-and-popular', page)

    def fetch_top_sellers(self, page: int = 1) -> SearchPage[GameResult]:
        return self._fetch_by_category('top-sellers', page)

    def fetch_top_rated(self, page: int = 1) -> SearchPage[GameResult]:
        return self._fetch_by_category('top-rated', page)

    def fetch_newest(self, page: int = 1) -> SearchPage[GameResult]:
        return self._fetch_by_category('newest', page)

    def search(self, query: str, page: int = 1) -> SearchPage[GameResult]:
        """Search games by free text; an empty query is rejected before any request"""
        query = (query or '').strip()
        if not query:
            raise InvalidQueryError('Search query must not be empty')
        self._check_page(page)

        self.logger.info(f"Searching for '{query}' (page {page})")
        path = '/search?' + urlencode({'q': query, 'page': page})
        return self._fetch_listing(path, SEARCH_CELL_SELECTOR, page, 'search')

    def fetch_game_info(self, game_id: str) -> GameInfo:
        """
        Fetch the detail page of one game.

        Args:
            game_id: Absolute URL, site-relative path or bare game id

        Returns:
            GameInfo with every field group that could be read from the page
        """
        url = self._resolve_game_url(game_id)
        self.logger.info(f"Fetching game info: {url}")

        html = self._get(url, 'fetch game info')
        soup = BeautifulSoup(html, 'html.parser')
        return self._parse_game_info(soup, url)

    # ------------------------------------------------------------------
    # Listing pages

    def _fetch_by_category(self, category: str, page: int) -> SearchPage[GameResult]:
        self._check_page(page)
        self.logger.info(f"Fetching {category} games (page {page})")

        path = f"/games/{category}"
        if page > 1:
            path += f"?page={page}"
        return self._fetch_listing(path, CATEGORY_CELL_SELECTOR, page, f"fetch {category} games")

    def _fetch_listing(self, path: str, cell_selector: str, page: int, operation: str) -> SearchPage[GameResult]:
        html = self._get(path, operation)
        soup = BeautifulSoup(html, 'html.parser')

        results = self._parse_listing(soup, cell_selector)
        pagination = self._parse_pagination(soup)

        return SearchPage(
            results=tuple(results),
            current_page=page,
            has_next_page=pagination.get('has_next_page'),
            total_pages=pagination.get('total_pages'),
        )

    def _parse_listing(self, soup: BeautifulSoup, cell_selector: str) -> List[GameResult]:
        """Build one result per listing cell, skipping cells that cannot be read"""
        cells = _outermost(soup.select(cell_selector))
        results = []
        skipped = 0

        for cell in cells:
            result = self._parse_game_cell(cell)
            if result is None:
                skipped += 1
                continue
            results.append(result)

        if not cells:
            self.logger.warning(f"No listing cells matched '{cell_selector}'")
        self.logger.debug(f"Parsed {len(results)} listing cells, skipped {skipped}")
        return results

    def _parse_game_cell(self, cell: Tag) -> Optional[GameResult]:
        """Read one listing cell; None means the cell is skipped"""
        try:
            title = first_text(cell, CELL_TITLE_SELECTOR)
            href = first_attr(cell, CELL_LINK_SELECTOR, 'href')
            if not title or not href:
                self.logger.debug("Skipping listing cell without title or link")
                return None

            url = to_absolute_url(href, self.base_url)
            image = first_attr(cell, CELL_IMAGE_SELECTOR, *IMAGE_ATTRS)
            price = parse_price(first_text(cell, CELL_PRICE_SELECTOR))

            return GameResult(
                id=extract_id_from_url(url),
                title=title,
                url=url,
                image=to_absolute_url(image, self.base_url) if image else None,
                price=price,
                is_free=price is None,
                platforms=tuple(parse_platforms(cell)),
                developer=first_text(cell, CELL_DEVELOPER_SELECTOR),
            )
        except Exception as e:
            self.logger.warning(f"Failed to parse game cell: {e}")
            return None

    def _parse_pagination(self, soup: BeautifulSoup) -> Dict[str, Any]:
        label = first_text(soup, PAGER_LABEL_SELECTOR) or ''
        match = PAGER_PATTERN.search(label)
        if match:
            current, total = int(match.group(1)), int(match.group(2))
            return {'has_next_page': current < total, 'total_pages': total}

        # No "Page X of Y" label, fall back to the next page link
        return {'has_next_page': soup.select_one(NEXT_PAGE_SELECTOR) is not None}

    # ------------------------------------------------------------------
    # Game pages

    def _parse_game_info(self, soup: BeautifulSoup, url: str) -> GameInfo:
        game_id = extract_id_from_url(url)
        panel = self._extract('info panel', lambda: self._extract_info_panel(soup), {})

        cover = self._extract('cover', lambda: self._extract_cover_image(soup), None)
        og_image = first_attr(soup, OG_IMAGE_SELECTOR, 'content')
        pricing = self._extract('pricing', lambda: self._extract_pricing_info(soup), {})
        ratings = self._extract('rating', lambda: self._extract_rating_info(soup), {})
        screenshots = self._extract('screenshots', lambda: self._extract_screenshots(soup), [])
        videos = self._extract('videos', lambda: self._extract_videos(soup), [])

        return GameInfo(
            id=game_id,
            title=self._extract('title', lambda: self._extract_title(soup), None) or game_id,
            url=url,
            image=og_image or cover,
            cover=cover or og_image,
            description=self._extract('description', lambda: self._extract_description(soup), None),
            developer=self._extract('developer', lambda: self._extract_developer(soup, panel), None),
            publisher=self._extract('publisher', lambda: _panel_text(panel, 'publisher'), None),
            platforms=tuple(self._extract('platforms', lambda: parse_platforms(soup), [])),
            genres=tuple(self._extract('genres', lambda: self._extract_genres(soup, panel), [])),
            tags=tuple(self._extract('tags', lambda: self._extract_tags(soup, panel), [])),
            price=pricing.get('price'),
            is_free=pricing.get('price') is None,
            is_on_sale=pricing.get('is_on_sale', False),
            original_price=pricing.get('original_price'),
            screenshots=tuple(screenshots),
            videos=tuple(video.url for video in videos),
            video_details=tuple(videos),
            rating=ratings.get('rating'),
            rating_count=ratings.get('rating_count'),
            release_date=self._extract('release date', lambda: self._extract_release_date(soup, panel), None),
        )

    def _extract(self, field: str, extractor: Callable[[], Any], default: Any) -> Any:
        """Run one field extractor; a failure leaves only that field at its default"""
        try:
            return extractor()
        except Exception as e:
            self.logger.warning(f"Could not extract {field}: {e}")
            return default

    def _extract_title(self, soup: BeautifulSoup) -> Optional[str]:
        """Title from the page heading, then og:title, then the document title"""
        title = first_text(soup, TITLE_SELECTOR) or first_text(soup, 'h1')
        if title:
            return title
        og_title = first_attr(soup, OG_TITLE_SELECTOR, 'content')
        if og_title:
            return clean_text(og_title)
        return clean_text(soup.title.get_text()) if soup.title else None

    def _extract_description(self, soup: BeautifulSoup) -> Optional[str]:
        """Description text, one line per paragraph or list item"""
        element = soup.select_one(DESCRIPTION_SELECTOR)
        if element is None:
            return None
        blocks = _outermost(element.find_all(DESCRIPTION_BLOCKS))
        if not blocks:
            return clean_text(element.get_text(' ')) or None
        # Inline markup inside a block stays on the block's line
        lines = [clean_text(block.get_text()) for block in blocks]
        return '\n'.join(line for line in lines if line) or None

    def _extract_developer(self, soup: BeautifulSoup, panel: Dict[str, Tag]) -> Optional[str]:
        """Author link text, or the info panel "Author" row"""
        return first_text(soup, DEVELOPER_SELECTOR) or _panel_text(panel, 'author')

    def _extract_cover_image(self, soup: BeautifulSoup) -> Optional[str]:
        """Header or thumbnail image URL"""
        src = first_attr(soup, COVER_SELECTOR, *IMAGE_ATTRS)
        return to_absolute_url(src, self.base_url) if src else None

    def _extract_genres(self, soup: BeautifulSoup, panel: Dict[str, Tag]) -> List[str]:
        """Genre labels, known genres spelled the way the marketplace spells them"""
        genres = _texts(soup.select(GENRE_SELECTOR)) or _panel_values(panel, 'genre')
        return [_canonical_genre(genre) for genre in genres]

    def _extract_tags(self, soup: BeautifulSoup, panel: Dict[str, Tag]) -> List[str]:
        """Tag labels from tag links, or the info panel "Tags" row"""
        tags = _texts(soup.select(TAG_SELECTOR))
        return tags or _panel_values(panel, 'tags')

    def _extract_pricing_info(self, soup: BeautifulSoup) -> Dict[str, Any]:
        """Current price, and the original price when the game is on sale"""
        price = parse_price(first_text(soup, PRICE_SELECTOR))

        # A parsable original price means the game is discounted
        original_price = parse_price(first_text(soup, ORIGINAL_PRICE_SELECTOR))
        return {
            'price': price,
            'is_on_sale': original_price is not None,
            'original_price': original_price,
        }

    def _extract_screenshots(self, soup: BeautifulSoup) -> List[str]:
        """Absolute screenshot URLs, lazy-loaded images included"""
        screenshots = []
        for img in soup.select(SCREENSHOT_SELECTOR):
            src = element_attr(img, 'src', 'data-src')
            if src:
                screenshots.append(to_absolute_url(src, self.base_url))
        return screenshots

    def _extract_videos(self, soup: BeautifulSoup) -> List[GameVideo]:
        """Embedded YouTube and Vimeo players"""
        # Embeds do not say whether they are trailers or gameplay, all are tagged trailer
        videos = []
        for selector in VIDEO_SELECTORS:
            for frame in soup.select(selector):
                src = element_attr(frame, 'src')
                if src:
                    videos.append(GameVideo(
                        url=to_absolute_url(src, self.base_url),
                        type=VideoType.TRAILER,
                        title=element_attr(frame, 'title'),
                    ))
        return videos

    def _extract_rating_info(self, soup: BeautifulSoup) -> Dict[str, Any]:
        """Average rating and number of ratings"""
        rating = None
        element = soup.select_one(RATING_SELECTOR)
        if element is not None:
            rating = parse_rating(clean_text(element.get_text(' ')))
            if rating is None:
                rating = parse_rating(element_attr(element, 'title'))

        return {
            'rating': rating,
            'rating_count': parse_number(first_text(soup, RATING_COUNT_SELECTOR)),
        }

    def _extract_release_date(self, soup: BeautifulSoup, panel: Dict[str, Tag]) -> Optional[str]:
        """Publication date from the info panel, else the first panel date"""
        # The info panel lists "Updated" before "Published", so ask for the row by name first
        for key in ('release date', 'published'):
            cell = panel.get(key)
            if cell is not None:
                date = first_attr(cell, 'abbr', 'title') or clean_text(cell.get_text(' '))
                if date:
                    return date
        return first_attr(soup, RELEASE_DATE_SELECTOR, 'title')

    def _extract_info_panel(self, soup: BeautifulSoup) -> Dict[str, Tag]:
        """Read the "More information" table into label -> value cell"""
        panel = {}
        for row in soup.select(INFO_PANEL_ROW_SELECTOR):
            cells = row.find_all(['td', 'th'])
            if len(cells) >= 2:
                key = clean_text(cells[0].get_text(' ')).rstrip(':').lower()
                if key and key not in panel:
                    panel[key] = cells[1]
        return panel

    # ------------------------------------------------------------------
    # Helpers

    def _get(self, path: str, operation: str) -> str:
        try:
            return self.http_client.get(path)
        except TransportError as e:
            self.logger.error(f"Failed to {operation}: {e}")
            raise ScraperError(operation, e) from e

    def _resolve_game_url(self, game_id: str) -> str:
        game_id = (game_id or '').strip()
        if not game_id:
            raise InvalidQueryError('Game id must not be empty')
        if game_id.startswith(('http://', 'https://')):
            return game_id
        if game_id.startswith('/'):
            return to_absolute_url(game_id, self.base_url)
        return f"{self.base_url}/games/{game_id}"

    @staticmethod
    def _check_page(page: int):
        if not isinstance(page, int) or page < 1:
            raise InvalidQueryError(f"Page must be a positive integer, got {page!r}")


def _outermost(elements: List[Tag]) -> List[Tag]:
    """Drop matches nested inside another match so each listing is read once"""
    matched = {id(element) for element in elements}
    return [
        element for element in elements
        if not any(id(parent) in matched for parent in element.parents)
    ]


def _canonical_genre(label: str) -> str:
    genre = Genre.lookup(label)
    return genre.value if genre else label


def _texts(elements: List[Tag]) -> List[str]:
    texts = []
    for element in elements:
        text = clean_text(element.get_text(' '))
        if text:
            texts.append(text)
    return texts


def _panel_values(panel: Dict[str, Tag], key: str) -> List[str]:
    """Link texts of an info panel row, or its comma separated text"""
    cell = panel.get(key)
    if cell is None:
        return []
    links = _texts(cell.find_all('a'))
    if links:
        return links
    return [part.strip() for part in clean_text(cell.get_text(' ')).split(',') if part.strip()]


def _panel_text(panel: Dict[str, Tag], key: str) -> Optional[str]:
    values = _panel_values(panel, key)
    return ', '.join(values) if values else None
