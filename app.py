#!/usr/bin/env python3
"""
itch.io Game Scraper - Dual Mode (CLI + REST API)
"""
import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from flask import Flask, abort, jsonify, request
from werkzeug.exceptions import HTTPException

from game_scraper import GAMES, Config, GameCatalogProvider, InvalidQueryError

SERVICE_NAME = 'itch-game-scraper'

# Category slug -> provider method
CATEGORY_OPERATIONS = {
    'new-and-popular': 'fetch_new_and_popular',
    'top-sellers': 'fetch_top_sellers',
    'top-rated': 'fetch_top_rated',
    'newest': 'fetch_newest',
}


def setup_logging(log_level='INFO', log_dir='logs', file_logging=False):
    handlers = [logging.StreamHandler(sys.stdout)]
    if file_logging:
        log_path = Path(log_dir)
        log_path.mkdir(exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        handlers.append(logging.FileHandler(log_path / f'game_scraper_{timestamp}.log'))

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )
    return logging.getLogger(__name__)


def create_app(config: Optional[Config] = None, scraper: Optional[GameCatalogProvider] = None) -> Flask:
    """Build the Flask application around one provider instance"""
    config = config or Config()
    scraper = scraper or GAMES['ItchIO'](config)
    logger = logging.getLogger(__name__)

    app = Flask(__name__)
    # Game ids may be full URLs, keep their "//" intact
    app.url_map.merge_slashes = False

    def page_arg() -> int:
        # Non-numeric values fall back to the first page
        return request.args.get('page', 1, type=int)

    @app.after_request
    def add_cors_headers(response):
        response.headers['Access-Control-Allow-Origin'] = config.cors_origin
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
        return response

    @app.errorhandler(InvalidQueryError)
    def handle_invalid_query(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(Exception)
    def handle_error(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.error(f"Request to {request.path} failed: {e}", exc_info=True)
        return jsonify({"error": str(e)}), 500

    @app.route('/api/games/<category>', methods=['GET'])
    def api_category(category):
        if category not in CATEGORY_OPERATIONS:
            abort(404)
        fetch = getattr(scraper, CATEGORY_OPERATIONS[category])
        return jsonify(fetch(page_arg()).to_dict())

    @app.route('/api/games/search', methods=['GET'])
    def api_search():
        query = request.args.get('q', '')
        if not query.strip():
            return jsonify({"error": 'Query parameter "q" is required'}), 400
        return jsonify(scraper.search(query, page_arg()).to_dict())

    @app.route('/api/games/info/<path:game_id>', methods=['GET'])
    def api_game_info(game_id):
        return jsonify(scraper.fetch_game_info(game_id).to_dict())

    @app.route('/api/health', methods=['GET'])
    def api_health():
        return jsonify({
            "status": "OK",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='itch.io Game Scraper')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--config', help='Path to a .env style config file')
    commands = parser.add_subparsers(dest='command', required=True)

    for category in CATEGORY_OPERATIONS:
        listing = commands.add_parser(category, help=f'List {category} games')
        listing.add_argument('--page', type=int, default=1)

    search = commands.add_parser('search', help='Search games')
    search.add_argument('query')
    search.add_argument('--page', type=int, default=1)

    info = commands.add_parser('info', help='Show one game by id or URL')
    info.add_argument('game_id')

    serve = commands.add_parser('serve', help='Run the REST API')
    serve.add_argument('--host')
    serve.add_argument('--port', type=int)
    return parser


def run_cli(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = Config(config_file=args.config)
    logger = setup_logging(args.log_level or config.log_level, config.log_dir, config.enable_file_logging)
    logger.debug(f"Loaded {config}")

    if args.command == 'serve':
        app = create_app(config)
        logger.info(f"API running at http://{args.host or config.api_host}:{args.port or config.api_port}")
        app.run(host=args.host or config.api_host, port=args.port or config.api_port, debug=False)
        return 0

    scraper = GAMES['ItchIO'](config)
    try:
        if args.command == 'search':
            result = scraper.search(args.query, args.page)
        elif args.command == 'info':
            result = scraper.fetch_game_info(args.game_id)
        else:
            result = getattr(scraper, CATEGORY_OPERATIONS[args.command])(args.page)
    except InvalidQueryError as e:
        logger.error(f"Invalid input: {e}")
        return 2
    except Exception as e:
        logger.error(f"An error occurred: {str(e)}", exc_info=True)
        return 1

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


def main():
    try:
        sys.exit(run_cli())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
