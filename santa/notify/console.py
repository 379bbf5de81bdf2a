from __future__ import annotations

from loguru import logger

from santa.notify.base import Notifier
from santa.services.registry import Participant


class ConsoleNotifier(Notifier):
    async def send(self, source: Participant, destination: Participant) -> None:
        message = self.template.render(source, destination)
        logger.bind(giver=source.name).info(
            "Would send to {to}: {subject} | {body}",
            to=self.recipient(source),
            subject=message.subject,
            body=message.body,
        )
