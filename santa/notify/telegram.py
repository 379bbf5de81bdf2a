from __future__ import annotations

import html
from typing import Optional, Union

from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from santa.notify.base import Notifier, NotifyError
from santa.notify.message import MessageTemplate
from santa.services.registry import Participant


def parse_chat_id(address: str) -> Union[int, str]:
    address = address.strip()
    if address.lstrip("-").isdigit():
        return int(address)
    if address.startswith("@") and len(address) > 1:
        return address
    raise NotifyError(f"{address!r} is not a Telegram chat id or @channel name.")


class TelegramNotifier(Notifier):
    def __init__(self, bot: Bot, template: MessageTemplate, redirect_to: Optional[str] = None) -> None:
        super().__init__(template, redirect_to)
        self.bot = bot

    @classmethod
    def from_token(
        cls,
        token: str,
        template: MessageTemplate,
        redirect_to: Optional[str] = None,
    ) -> TelegramNotifier:
        bot = Bot(token=token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
        return cls(bot, template, redirect_to)

    async def send(self, source: Participant, destination: Participant) -> None:
        message = self.template.render(source, destination)
        chat_id = parse_chat_id(self.recipient(source))
        await self.bot.send_message(
            chat_id,
            f"<b>{html.escape(message.subject)}</b>\n\n{message.body}",
            parse_mode=ParseMode.HTML,
        )

    async def close(self) -> None:
        await self.bot.session.close()
