from dataclasses import fields

from crpt_client.config.settings import DEFAULT_API_URL, Settings, get_settings


def test_settings_defaults(monkeypatch) -> None:
    for name in (
        "CRPT_API_URL",
        "CRPT_TIME_UNIT",
        "CRPT_REQUEST_LIMIT",
        "CRPT_REQUEST_QUEUE_LIMIT",
        "CRPT_SHUTDOWN_GRACE_SECONDS",
        "CRPT_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("crpt_client.config.settings.load_dotenv", lambda: None)
    settings = get_settings()
    assert settings.api_url == DEFAULT_API_URL
    assert settings.time_unit == "SECONDS"
    assert settings.request_limit == 10
    assert settings.request_queue_limit == 1000
    assert settings.shutdown_grace_seconds == 5.0
    assert settings.token is None


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setattr("crpt_client.config.settings.load_dotenv", lambda: None)
    monkeypatch.setenv("CRPT_TIME_UNIT", "minutes")
    monkeypatch.setenv("CRPT_REQUEST_LIMIT", "25")
    monkeypatch.setenv("CRPT_REQUEST_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("CRPT_TOKEN", "abc")
    settings = get_settings()
    assert settings.time_unit == "MINUTES"
    assert settings.request_limit == 25
    assert settings.request_timeout_seconds == 12.5
    assert settings.token == "abc"


def test_settings_ignore_malformed_numbers(monkeypatch) -> None:
    monkeypatch.setattr("crpt_client.config.settings.load_dotenv", lambda: None)
    monkeypatch.setenv("CRPT_REQUEST_LIMIT", "lots")
    monkeypatch.setenv("CRPT_SHUTDOWN_GRACE_SECONDS", "soon")
    settings = get_settings()
    assert settings.request_limit == 10
    assert settings.shutdown_grace_seconds == 5.0


def test_settings_carry_only_client_fields() -> None:
    names = {field.name for field in fields(Settings)}
    assert "app_name" not in names
    assert "app_version" not in names
    assert {"api_url", "time_unit", "request_limit", "request_queue_limit"} <= names
