"""
Тесты сборки конфигурации из окружения.
"""

from support_relay.config import load_config

_VARS = [
    "STORAGE_BACKEND", "MONGODB_URI", "MONGODB_DB", "AI_PROVIDER", "GEMINI_API_KEY",
    "OPENAI_API_KEY", "AI_MODEL", "AI_BASE_URL", "AI_TIMEOUT", "HOST", "PORT", "LOG_LEVEL",
]


def _clean_env(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_key_disable_ai(monkeypatch, tmp_path) -> None:
    _clean_env(monkeypatch)
    cfg = load_config(env_file=str(tmp_path / "missing.env"))

    assert cfg.store.backend == "mongo"
    assert cfg.store.mongodb_uri is None
    assert cfg.ai.provider == "gemini"
    assert cfg.ai.api_key is None
    assert cfg.ai.enabled is False
    assert cfg.server.port == 3001


def test_gemini_key_and_overrides(monkeypatch, tmp_path) -> None:
    _clean_env(monkeypatch)
    monkeypatch.setenv("GEMINI_API_KEY", "  abc  ")
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017")
    monkeypatch.setenv("AI_TIMEOUT", "5")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = load_config(env_file=str(tmp_path / "missing.env"))

    assert cfg.ai.api_key == "abc"
    assert cfg.ai.enabled is True
    assert cfg.ai.timeout_s == 5.0
    assert cfg.store.mongodb_uri == "mongodb://localhost:27017"
    assert cfg.server.port == 8080
    assert cfg.server.log_level == "DEBUG"


def test_openai_provider_reads_openai_key(monkeypatch, tmp_path) -> None:
    _clean_env(monkeypatch)
    monkeypatch.setenv("AI_PROVIDER", "OpenAI")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
    monkeypatch.setenv("OPENAI_API_KEY", "openai-key")

    cfg = load_config(env_file=str(tmp_path / "missing.env"))

    assert cfg.ai.provider == "openai"
    assert cfg.ai.api_key == "openai-key"
    assert cfg.ai.model == "gpt-4o-mini"


def test_server_config_feeds_launcher(monkeypatch, tmp_path) -> None:
    # run_server.py: единственная точка запуска uvicorn, host/port только из ServerConfig
    _clean_env(monkeypatch)
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9001")

    server = load_config(env_file=str(tmp_path / "missing.env")).server

    assert (server.host, server.port, server.log_level) == ("127.0.0.1", 9001, "INFO")

    import app.main as app_main
    assert not hasattr(app_main, "uvicorn")
