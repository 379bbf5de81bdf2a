from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from santa.notify.message import MessageTemplate
from santa.services.registry import Participant


class NotifyError(RuntimeError):
    pass


class Notifier(ABC):
    """Delivers one assignment message to the giver.

    ``send`` returns on success and raises on any failure. With
    ``redirect_to`` set, every message goes to that address instead of the
    giver's, which is how dry runs are checked before the real one.
    """

    def __init__(self, template: MessageTemplate, redirect_to: Optional[str] = None) -> None:
        self.template = template
        self.redirect_to = redirect_to

    def recipient(self, source: Participant) -> str:
        return self.redirect_to or source.address

    @abstractmethod
    async def send(self, source: Participant, destination: Participant) -> None:
        ...

    async def close(self) -> None:
        return None
