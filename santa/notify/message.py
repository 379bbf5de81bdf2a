from __future__ import annotations

import html
import re
from dataclasses import dataclass

from santa.services.registry import Participant

_MACRO = re.compile(r"%([123])")


@dataclass(frozen=True)
class RenderedMessage:
    subject: str
    body: str


@dataclass(frozen=True)
class MessageTemplate:
    """Subject plus an HTML body with macros.

    ``%1`` is the giver's name, ``%2`` the giver's address and ``%3`` the
    receiver's name. Substituted values are HTML-escaped.
    """

    subject: str
    body: str

    def render(self, source: Participant, destination: Participant) -> RenderedMessage:
        values = {
            "1": source.name,
            "2": source.address,
            "3": destination.name,
        }
        body = _MACRO.sub(lambda match: html.escape(values[match.group(1)]), self.body)
        return RenderedMessage(subject=self.subject, body=body)
