from santa.core.config import Settings
from santa.notify.base import Notifier, NotifyError
from santa.notify.console import ConsoleNotifier
from santa.notify.message import MessageTemplate, RenderedMessage
from santa.notify.smtp import SmtpNotifier
from santa.notify.telegram import TelegramNotifier


def build_notifier(settings: Settings, template: MessageTemplate) -> Notifier:
    redirect_to = settings.dry_run_address if settings.dry_run else None

    if settings.notifier == "telegram":
        return TelegramNotifier.from_token(settings.bot_token, template, redirect_to=redirect_to)
    if settings.notifier == "smtp":
        return SmtpNotifier(
            settings.smtp_host,
            settings.smtp_port,
            settings.smtp_from,
            template,
            username=settings.smtp_username,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
            redirect_to=redirect_to,
        )
    return ConsoleNotifier(template, redirect_to=redirect_to)


__all__ = [
    "ConsoleNotifier",
    "MessageTemplate",
    "Notifier",
    "NotifyError",
    "RenderedMessage",
    "SmtpNotifier",
    "TelegramNotifier",
    "build_notifier",
]
