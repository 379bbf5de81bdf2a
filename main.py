from __future__ import annotations

import asyncio
import sys

import uvloop
from loguru import logger

from santa.core.config import Settings, load_settings
from santa.core.logging import setup_logging
from santa.db import init_engine
from santa.notify import build_notifier
from santa.services.assignment import AssignmentError
from santa.services.exchange import ExchangePlan, deliver_exchange, plan_from_config
from santa.services.journal import DeliveryJournal
from santa.services.registry import ConfigurationError
from santa.services.santa_file import SantaConfig, load_santa_file

WARNING = (
    "WARNING: This is about to send out messages to everyone involved in the secret santa event. "
    "Please make sure that you have permission to contact all of the people in {path} "
    "and that you are meaning to do this."
)


def confirm_dispatch(settings: Settings) -> bool:
    # Runs before the event loop starts so Ctrl-C interrupts input() directly.
    if settings.dry_run:
        logger.info("Doing a dry-run of matching!")
        return True
    if settings.assume_yes:
        return True

    print(WARNING.format(path=settings.santa_file))
    print()
    try:
        input("To continue press enter. To cancel press ctrl-c.")
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return True


async def send_assignments(settings: Settings, config: SantaConfig, plan: ExchangePlan) -> int:
    journal = None
    if settings.database_url:
        journal = DeliveryJournal.start(plan.seed, len(plan.participants), dry_run=settings.dry_run)

    notifier = build_notifier(settings, config.template)
    try:
        report = await deliver_exchange(
            plan,
            notifier,
            concurrency=settings.send_concurrency,
            retry_delay=settings.retry_delay,
            max_attempts=settings.max_send_attempts,
            journal=journal,
        )
    finally:
        await notifier.close()

    logger.info(
        "Done! {delivered} delivered after {failures} failed attempts",
        delivered=report.delivered,
        failures=report.failures,
    )
    return 1 if report.dead_letters else 0


def main() -> int:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_path)
    if settings.database_url:
        init_engine(settings.database_url)

    try:
        config = load_santa_file(settings.santa_file)
        logger.info("Found {count} people", count=len(config.registry))
        plan = plan_from_config(config)
    except ConfigurationError as exc:
        logger.error("Invalid santa file: {error}", error=str(exc))
        return 1
    except AssignmentError as exc:
        logger.error(str(exc))
        return 1

    if not confirm_dispatch(settings):
        logger.info("Cancelled, nothing was sent")
        return 1

    return asyncio.run(send_assignments(settings, config, plan))


if __name__ == "__main__":
    if not getattr(asyncio, "debug", False):
        uvloop.install()

    sys.exit(main())
