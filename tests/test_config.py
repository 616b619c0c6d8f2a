import logging

from tracker.config import Settings, configure_logging, load_settings

ENV_KEYS = (
    "EXPENSES_API_URL", "DATABASE_URL", "PORT", "REQUEST_TIMEOUT",
    "CURRENCY", "CHART_Y_MAX", "LOG_LEVEL", "PERSIST_EXPENSES",
)


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)

    assert load_settings() == Settings()


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("EXPENSES_API_URL", "http://backend:8000/api/expenses")
    monkeypatch.setenv("PORT", "8000")
    monkeypatch.setenv("REQUEST_TIMEOUT", "1.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("PERSIST_EXPENSES", "TRUE")

    s = load_settings()

    assert s.api_url == "http://backend:8000/api/expenses"
    assert s.port == 8000
    assert s.request_timeout == 1.5
    assert s.log_level == "DEBUG"
    assert s.persist_expenses is True


def test_configure_logging_sets_level():
    configure_logging("WARNING")
    assert logging.getLogger().level == logging.WARNING
    configure_logging("INFO")
