import pytest

from santa.core.config import load_settings

VARIABLES = [
    "SANTA_FILE",
    "NOTIFIER",
    "BOT_TOKEN",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USERNAME",
    "SMTP_PASSWORD",
    "SMTP_FROM",
    "SMTP_STARTTLS",
    "DRY_RUN",
    "DRY_RUN_ADDRESS",
    "SEND_CONCURRENCY",
    "RETRY_DELAY",
    "MAX_SEND_ATTEMPTS",
    "SANTA_ASSUME_YES",
    "DATABASE_URL",
    "LOG_LEVEL",
    "LOG_PATH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_defaults_for_log_notifier(monkeypatch):
    monkeypatch.setenv("NOTIFIER", "log")
    settings = load_settings()

    assert settings.santa_file == "santa.txt"
    assert settings.send_concurrency == 4
    assert settings.retry_delay == 1.0
    assert settings.max_send_attempts is None
    assert settings.dry_run is False
    assert settings.database_url is None
    assert settings.log_path == "logs/santa.log"


def test_smtp_requires_host_and_sender(monkeypatch):
    with pytest.raises(ValueError, match="SMTP_HOST"):
        load_settings()

    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    with pytest.raises(ValueError, match="SMTP_FROM"):
        load_settings()


def test_smtp_dry_run_defaults_to_sender(monkeypatch):
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_FROM", "santa@example.com")
    monkeypatch.setenv("SMTP_PORT", "2525")
    monkeypatch.setenv("SMTP_STARTTLS", "false")
    monkeypatch.setenv("DRY_RUN", "yes")
    settings = load_settings()

    assert settings.notifier == "smtp"
    assert settings.smtp_port == 2525
    assert settings.smtp_starttls is False
    assert settings.dry_run_address == "santa@example.com"


def test_telegram_requires_token(monkeypatch):
    monkeypatch.setenv("NOTIFIER", "telegram")
    with pytest.raises(ValueError, match="BOT_TOKEN"):
        load_settings()


def test_telegram_dry_run_requires_address(monkeypatch):
    monkeypatch.setenv("NOTIFIER", "telegram")
    monkeypatch.setenv("BOT_TOKEN", "42:TEST-token")
    monkeypatch.setenv("DRY_RUN", "1")
    with pytest.raises(ValueError, match="DRY_RUN_ADDRESS"):
        load_settings()


@pytest.mark.parametrize(
    "name, value",
    [
        ("NOTIFIER", "pigeon"),
        ("SEND_CONCURRENCY", "0"),
        ("SEND_CONCURRENCY", "four"),
        ("MAX_SEND_ATTEMPTS", "0"),
        ("RETRY_DELAY", "soon"),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv("NOTIFIER", "log")
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_settings()
