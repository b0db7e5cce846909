from game_scraper.config import DEFAULT_USER_AGENT, Config


def test_defaults(monkeypatch):
    for name in ("BASE_URL", "REQUEST_TIMEOUT", "USER_AGENT", "API_PORT", "CORS_ORIGIN", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("game_scraper.config.load_dotenv", lambda *args, **kwargs: None)

    config = Config()

    assert config.base_url == "https://itch.io"
    assert config.request_timeout == 10.0
    assert config.api_port == 3000
    assert config.cors_origin == "*"
    assert config.get_headers()["User-Agent"] == DEFAULT_USER_AGENT


def test_environment_overrides(monkeypatch):
    monkeypatch.setattr("game_scraper.config.load_dotenv", lambda *args, **kwargs: None)
    monkeypatch.setenv("BASE_URL", "https://mirror.example/")
    monkeypatch.setenv("REQUEST_TIMEOUT", "4.5")
    monkeypatch.setenv("USER_AGENT", "custom-agent")
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    config = Config()

    assert config.base_url == "https://mirror.example"
    assert config.request_timeout == 4.5
    assert config.get_headers()["User-Agent"] == "custom-agent"
    # Unknown levels fall back to INFO
    assert config.log_level == "INFO"
    assert config.to_dict()["base_url"] == "https://mirror.example"


def test_config_file_is_loaded(tmp_path, monkeypatch):
    # Registers cleanup so the value loaded from the file does not leak
    monkeypatch.setenv("API_PORT", "1")
    monkeypatch.delenv("API_PORT")
    env_file = tmp_path / "scraper.env"
    env_file.write_text("API_PORT=8123\n")

    config = Config(config_file=str(env_file))

    assert config.api_port == 8123
