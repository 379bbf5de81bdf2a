import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

NOTIFIERS = {"smtp", "telegram", "log"}


@dataclass(frozen=True)
class Settings:
    santa_file: str
    notifier: str
    bot_token: Optional[str]
    smtp_host: Optional[str]
    smtp_port: int
    smtp_username: Optional[str]
    smtp_password: Optional[str]
    smtp_from: Optional[str]
    smtp_starttls: bool
    dry_run: bool
    dry_run_address: Optional[str]
    send_concurrency: int
    retry_delay: float
    max_send_attempts: Optional[int]
    assume_yes: bool
    database_url: Optional[str]
    log_level: str
    log_path: str


def _flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _number(name: str, default, cast):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}.") from None


def load_settings() -> Settings:
    notifier = os.getenv("NOTIFIER", "smtp").strip().lower()
    bot_token = os.getenv("BOT_TOKEN")
    smtp_host = os.getenv("SMTP_HOST")
    smtp_from = os.getenv("SMTP_FROM")
    dry_run = _flag("DRY_RUN")
    dry_run_address = os.getenv("DRY_RUN_ADDRESS") or (smtp_from if notifier == "smtp" else None)
    send_concurrency = _number("SEND_CONCURRENCY", 4, int)
    max_send_attempts = _number("MAX_SEND_ATTEMPTS", None, int)

    if notifier not in NOTIFIERS:
        raise ValueError(f"NOTIFIER must be one of {', '.join(sorted(NOTIFIERS))}.")
    if notifier == "telegram" and not bot_token:
        raise ValueError("BOT_TOKEN is required for the telegram notifier. Set it in the environment or .env file.")
    if notifier == "smtp" and not smtp_host:
        raise ValueError("SMTP_HOST is required for the smtp notifier. Set it in the environment or .env file.")
    if notifier == "smtp" and not smtp_from:
        raise ValueError("SMTP_FROM is required for the smtp notifier. Set it in the environment or .env file.")
    if dry_run and notifier != "log" and not dry_run_address:
        raise ValueError("DRY_RUN_ADDRESS is required for a dry run. Set it in the environment or .env file.")
    if send_concurrency < 1:
        raise ValueError("SEND_CONCURRENCY must be at least 1.")
    if max_send_attempts is not None and max_send_attempts < 1:
        raise ValueError("MAX_SEND_ATTEMPTS must be at least 1 when set.")

    return Settings(
        santa_file=os.getenv("SANTA_FILE", "santa.txt"),
        notifier=notifier,
        bot_token=bot_token,
        smtp_host=smtp_host,
        smtp_port=_number("SMTP_PORT", 587, int),
        smtp_username=os.getenv("SMTP_USERNAME") or None,
        smtp_password=os.getenv("SMTP_PASSWORD") or None,
        smtp_from=smtp_from,
        smtp_starttls=_flag("SMTP_STARTTLS", default=True),
        dry_run=dry_run,
        dry_run_address=dry_run_address,
        send_concurrency=send_concurrency,
        retry_delay=_number("RETRY_DELAY", 1.0, float),
        max_send_attempts=max_send_attempts,
        assume_yes=_flag("SANTA_ASSUME_YES"),
        database_url=os.getenv("DATABASE_URL") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_path=os.getenv("LOG_PATH", "logs/santa.log"),
    )
