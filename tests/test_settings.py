from settings import load_settings, dev_tools_enabled


def test_defaults(monkeypatch):
    for name in ["APP_ENV", "APP_URL", "NEXT_PUBLIC_APP_URL", "ANALYZE_BACKEND", "STORE_BACKEND", "ALLOWED_ORIGINS"]:
        monkeypatch.delenv(name, raising=False)

    config = load_settings()

    assert config["APP_ENV"] == "development"
    assert config["APP_URL"] == "http://localhost:5000"
    assert config["ANALYZE_BACKEND"] == "fixture"
    assert config["STORE_BACKEND"] == "memory"
    assert config["ALLOWED_ORIGINS"] == ["*"]


def test_app_url_fallback_and_origins(monkeypatch):
    monkeypatch.delenv("APP_URL", raising=False)
    monkeypatch.setenv("NEXT_PUBLIC_APP_URL", "https://patternlabs.app/")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://patternlabs.app, http://192.168.1.70:5000 ,")
    monkeypatch.setenv("ANALYZE_BACKEND", "OpenAI")

    config = load_settings()

    assert config["APP_URL"] == "https://patternlabs.app"
    assert config["ALLOWED_ORIGINS"] == ["https://patternlabs.app", "http://192.168.1.70:5000"]
    assert config["ANALYZE_BACKEND"] == "openai"


def test_dev_tools_enabled():
    assert dev_tools_enabled({"APP_ENV": "development"}) is True
    assert dev_tools_enabled({"APP_ENV": "staging"}) is True
    assert dev_tools_enabled({"APP_ENV": "production"}) is False
