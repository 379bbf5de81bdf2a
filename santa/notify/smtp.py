from __future__ import annotations

import asyncio
import smtplib
from email.mime.text import MIMEText
from typing import Optional

from santa.notify.base import Notifier
from santa.notify.message import MessageTemplate, RenderedMessage
from santa.services.registry import Participant


class SmtpNotifier(Notifier):
    """Sends each assignment as an HTML e-mail.

    ``smtplib`` is blocking, so every delivery runs in a worker thread and
    opens its own connection.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        template: MessageTemplate,
        username: Optional[str] = None,
        password: Optional[str] = None,
        starttls: bool = True,
        redirect_to: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(template, redirect_to)
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    def build_message(self, message: RenderedMessage, to: str) -> MIMEText:
        mime = MIMEText(message.body, "html", "utf-8")
        mime["Subject"] = message.subject
        mime["From"] = self.sender
        mime["To"] = to
        return mime

    async def send(self, source: Participant, destination: Participant) -> None:
        message = self.template.render(source, destination)
        mime = self.build_message(message, self.recipient(source))
        await asyncio.to_thread(self._deliver, mime)

    def _deliver(self, mime: MIMEText) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.starttls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(mime)
