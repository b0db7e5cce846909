"""Shared fixtures: a recording transport double and HTML pages."""

import pytest

from game_scraper import Config, ItchScraper
from game_scraper.exceptions import TransportError

LISTING_PAGE = """
<html><body>
  <div class="game_grid_widget">
    <div class="game_cell" data-game_id="1">
      <a class="thumb_link game_link" href="https://alpha.itch.io/first-game">
        <div class="game_thumb"><img data-lazy_src="https://img.itch.zone/first.png"></div>
      </a>
      <div class="game_cell_data">
        <div class="game_title"><a class="title game_link" href="https://alpha.itch.io/first-game">First Game</a></div>
        <div class="game_text">A short pitch</div>
        <div class="game_author"><a href="https://alpha.itch.io">Alpha Studio</a></div>
        <div class="game_platform">
          <span class="icon icon-windows"></span>
          <span class="icon icon-linux"></span>
        </div>
        <div class="price_tag"><div class="price_value price">$4.99</div></div>
      </div>
    </div>
    <div class="game_cell" data-game_id="2">
      <div class="game_cell_data">
        <div class="game_title">Broken Cell</div>
        <div class="game_author">Nobody</div>
      </div>
    </div>
    <div class="game_cell" data-game_id="3">
      <div class="game_cell_data">
        <div class="game_title"><a class="title game_link" href="/games/second-game">Second Game</a></div>
        <div class="game_author">Beta Games</div>
        <div class="game_platform"><span class="icon icon-html5"></span></div>
      </div>
    </div>
  </div>
  <div class="pager"><span class="pager_label">Page 2 of 5</span></div>
</body></html>
"""

DETAIL_PAGE = """
<html>
<head>
  <title>Night Walk by Gamma Dev</title>
  <meta property="og:image" content="https://img.itch.zone/og-night-walk.png">
</head>
<body>
  <div class="header_image"><img src="https://img.itch.zone/header-night-walk.png"></div>
  <h1 class="game_title">Night Walk</h1>
  <div class="formatted_description user_formatted">
    <p>A quiet horror walk.</p>
    <p>Bring a lamp.</p>
  </div>
  <div class="buy_row">
    <a class="buy_btn" href="/purchase"><span class="price">$7.99</span></a>
    <span class="original_price">$9.99</span>
  </div>
  <div class="screenshot_list">
    <a href="https://img.itch.zone/shot1-full.png"><img src="https://img.itch.zone/shot1.png"></a>
    <a href="https://img.itch.zone/shot2-full.png"><img data-src="//img.itch.zone/shot2.png"></a>
  </div>
  <div class="video_embed">
    <iframe src="https://vimeo.com/video/42"></iframe>
    <iframe src="//www.youtube.com/embed/abc123" title="Launch trailer"></iframe>
  </div>
  <div class="game_info_panel_widget">
    <table>
      <tr><td>Updated</td><td><abbr title="12 March 2024 @ 10:00 UTC">Mar 12, 2024</abbr></td></tr>
      <tr><td>Published</td><td><abbr title="01 February 2024 @ 09:30 UTC">Feb 01, 2024</abbr></td></tr>
      <tr><td>Status</td><td>Released</td></tr>
      <tr><td>Platforms</td><td><a href="/games/platform-windows">Windows</a><span class="icon icon-windows"></span><span class="icon icon-apple"></span></td></tr>
      <tr><td>Rating</td><td>
        <div class="aggregate_rating" title="4.6 average rating from 1,234 total ratings"><span class="star_fill"></span></div>
        <span class="rating_count">(1,234 total ratings)</span>
      </td></tr>
      <tr><td>Author</td><td><a href="https://gamma.itch.io">Gamma Dev</a></td></tr>
      <tr><td>Publisher</td><td><a href="https://delta.itch.io">Delta Publishing</a></td></tr>
      <tr><td>Genre</td><td><a href="/games/genre-horror">Horror</a>, <a href="/games/genre-adventure">Adventure</a></td></tr>
      <tr><td>Tags</td><td><a href="/games/tag-atmospheric">Atmospheric</a>, <a href="/games/tag-short">Short</a></td></tr>
    </table>
  </div>
</body>
</html>
"""


class FakeHttpClient:
    """Transport double returning canned pages and recording every call"""

    def __init__(self, pages=None, default=None, error=None):
        self.pages = pages or {}
        self.default = default
        self.error = error
        self.calls = []

    def get(self, path, **overrides):
        self.calls.append(path)
        if self.error is not None:
            raise self.error
        if path in self.pages:
            return self.pages[path]
        if self.default is not None:
            return self.default
        raise TransportError(f"HTTP request failed: 404 for {path}", url=path, status_code=404)


@pytest.fixture
def config(monkeypatch):
    monkeypatch.setenv('BASE_URL', 'https://itch.io')
    monkeypatch.setenv('REQUEST_TIMEOUT', '10')
    return Config()


@pytest.fixture
def make_scraper(config):
    def _make(**kwargs):
        client = FakeHttpClient(**kwargs)
        return ItchScraper(config, http_client=client), client
    return _make
