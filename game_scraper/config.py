"""
Configuration Module
Handles configuration settings for the game scraper and its API.
"""

# Import required standard library modules
import os  # For reading environment variables
import logging  # For reporting suspicious settings
from pathlib import Path  # For object-oriented filesystem paths
from typing import Optional  # For type hints
from dotenv import load_dotenv  # For loading environment variables

DEFAULT_BASE_URL = "https://itch.io"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Config:
    """Configuration management for the game scraper"""

    def __init__(self, config_file: Optional[str] = None):
        # Initialize logger for this class
        self.logger = logging.getLogger(__name__)

        # Load environment variables from specified file or default .env
        if config_file and Path(config_file).exists():
            load_dotenv(config_file)  # Load from specified config file
        else:
            load_dotenv()  # Load from default .env file

        # Upstream site settings
        self.base_url = os.getenv('BASE_URL', DEFAULT_BASE_URL).rstrip('/')  # Marketplace origin
        self.request_timeout = float(os.getenv('REQUEST_TIMEOUT', '10'))  # Request timeout in seconds
        self.user_agent = os.getenv('USER_AGENT', DEFAULT_USER_AGENT)  # Browser-like user agent

        # Logging configuration
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')  # Default log level
        self.log_dir = os.getenv('LOG_DIR', 'logs')  # Directory for log files
        # Whether to enable file logging
        self.enable_file_logging = os.getenv('ENABLE_FILE_LOGGING', 'false').lower() == 'true'

        # REST API settings
        self.api_host = os.getenv('API_HOST', '127.0.0.1')
        self.api_port = int(os.getenv('API_PORT', '3000'))
        self.cors_origin = os.getenv('CORS_ORIGIN', '*')

        # Validate the loaded configuration
        self._validate_config()

    def _validate_config(self):
        """Validate configuration values to ensure they are reasonable"""
        if not self.base_url.startswith(('http://', 'https://')):
            self.logger.warning(f"Base URL has no http(s) scheme: {self.base_url}")

        # Validate request timeout
        if self.request_timeout < 2:
            self.logger.warning("Request timeout is very low, may cause failed requests")

        if self.request_timeout > 60:
            self.logger.warning("Request timeout is very high, slow pages will block callers")

        if self.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            self.logger.warning(f"Unknown log level {self.log_level}, falling back to INFO")
            self.log_level = 'INFO'

    def get_headers(self) -> dict:
        """Get default HTTP request headers"""
        return {
            'User-Agent': self.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive',
            'Upgrade-Insecure-Requests': '1',
        }

    def to_dict(self) -> dict:
        """Export configuration as a dictionary for serialization"""
        return {
            'base_url': self.base_url,
            'request_timeout': self.request_timeout,
            'user_agent': self.user_agent,
            'log_level': self.log_level,
            'log_dir': self.log_dir,
            'enable_file_logging': self.enable_file_logging,
            'api_host': self.api_host,
            'api_port': self.api_port,
            'cors_origin': self.cors_origin,
        }

    def __str__(self):
        """Return a human-readable string representation of the configuration"""
        return f"GameScraper Config (base: {self.base_url}, timeout: {self.request_timeout}s)"
