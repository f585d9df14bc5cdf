"""ChatSession on top of the python-telegram-bot Bot API.

Telegram has no per-member nickname, so a member's admin custom title
stands in for it. set_chat_administrator_custom_title only works for
administrators promoted by the bot; anything else surfaces as RemoteError.
"""

import logging

from telegram import MessageEntity, User
from telegram.constants import MessageLimit
from telegram.error import TelegramError

from chatlock.core.errors import RemoteError
from chatlock.core.session import OutboundMessage

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = MessageLimit.MAX_TEXT_LENGTH


def utf16_len(text):
    """Length in UTF-16 code units, the unit Telegram entity offsets use."""
    return len(text.encode("utf-16-le")) // 2


def chunk_text(text, limit=MAX_TEXT_LENGTH):
    """Split text on line boundaries into pieces of at most limit characters."""
    if len(text) <= limit:
        return [text]

    chunks = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def render_mentions(message):
    """Return (text, entities) with a text_mention entity per mention.

    A tag missing from the text is appended to it.
    """
    text = message.text
    entities = []
    for mention in message.mentions:
        position = text.find(mention.tag)
        if position < 0:
            text = f"{text} {mention.tag}" if text else mention.tag
            position = len(text) - len(mention.tag)
        entities.append(
            MessageEntity(
                type=MessageEntity.TEXT_MENTION,
                offset=utf16_len(text[:position]),
                length=utf16_len(mention.tag),
                user=User(id=_user_id(mention.member_id), first_name=mention.tag, is_bot=False),
            )
        )
    return text, entities


def _user_id(member):
    try:
        return int(member)
    except (TypeError, ValueError) as e:
        raise RemoteError(f"invalid Telegram user id: {member!r}") from e


class TelegramChatSession:
    def __init__(self, bot):
        self.bot = bot

    async def send_message(self, message, group):
        if isinstance(message, OutboundMessage) and message.mentions:
            text, entities = render_mentions(message)
            await self._call(self.bot.send_message, chat_id=group, text=text, entities=entities)
            return

        text = message.text if isinstance(message, OutboundMessage) else message
        for chunk in chunk_text(text):
            await self._call(self.bot.send_message, chat_id=group, text=chunk)

    async def set_title(self, title, group):
        await self._call(self.bot.set_chat_title, chat_id=group, title=title)

    async def set_nickname(self, nickname, group, member):
        await self._call(
            self.bot.set_chat_administrator_custom_title,
            chat_id=group,
            user_id=_user_id(member),
            custom_title=nickname,
        )

    async def _call(self, method, **kwargs):
        try:
            return await method(**kwargs)
        except TelegramError as e:
            logger.debug("[telegram] %s failed: %s", getattr(method, "__name__", method), e)
            raise RemoteError(e.message) from e
