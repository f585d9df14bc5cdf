"""Admin command dispatcher.

Only the current admin can issue commands, and only with the current prefix.
Everything else is ignored without a reply. Commands are looked up in
COMMANDS, which maps each name to its argument shape and handler.

Dispatch itself never awaits. State changes and their flush to disk happen
before dispatch() returns. Remote calls and replies are spawned on the
scheduler, and their results come back as chat replies.
"""

import logging
import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from chatlock.core import replies
from chatlock.core.errors import IndexOutOfRange, RemoteError, UsageError
from chatlock.core.session import Mention, OutboundMessage

logger = logging.getLogger(__name__)


class ArgShape(Enum):
    NONE = "none"              # extra tokens are ignored
    TOKEN = "token"            # exactly one token
    TEXT = "text"              # free text, at least one token
    TOKEN_TEXT = "token_text"  # one token, then free text


@dataclass(frozen=True)
class CommandSpec:
    name: str
    shape: ArgShape
    hint: str
    summary: str
    handler: Callable

    def parse_args(self, tokens):
        """Turn the argument tokens into handler arguments or raise UsageError."""
        if self.shape is ArgShape.NONE:
            return ()
        if self.shape is ArgShape.TOKEN and len(tokens) == 1:
            return (tokens[0],)
        if self.shape is ArgShape.TEXT and tokens:
            return (" ".join(tokens),)
        if self.shape is ArgShape.TOKEN_TEXT and len(tokens) >= 2:
            return (tokens[0], " ".join(tokens[1:]))
        raise UsageError(self.name, self.hint)


COMMANDS: dict[str, CommandSpec] = {}


def command(name, shape, hint, summary):
    def register(func):
        COMMANDS[name] = CommandSpec(name, shape, hint, summary, func)
        return func
    return register


def split_command(text, prefix):
    """Return (command, args) for text starting with prefix, else None."""
    body = text.strip()
    if not body.startswith(prefix):
        return None
    parts = body[len(prefix):].split()
    if not parts:
        return None
    return parts[0].lower(), parts[1:]


class CommandDispatcher:
    def __init__(self, registry, corpus, session, scheduler, rng=None):
        self.registry = registry
        self.corpus = corpus
        self.session = session
        self.scheduler = scheduler
        self.rng = rng or random.Random()

    def dispatch(self, event):
        """Run an admin command. Returns False if the event was ignored."""
        if event.sender != self.registry.admin:
            return False
        parsed = split_command(event.text, self.registry.prefix)
        if parsed is None:
            return False

        name, tokens = parsed
        group = event.group
        spec = COMMANDS.get(name)
        if spec is None:
            self.reply(group, replies.UNKNOWN_COMMAND.format(prefix=self.registry.prefix))
            return True

        try:
            args = spec.parse_args(tokens)
        except UsageError as e:
            self.reply(group, replies.USAGE.format(prefix=self.registry.prefix, command=e.command, hint=e.hint))
            return True

        logger.info("[command] %s in %s", name, group)
        spec.handler(self, group, *args)
        return True

    def reply(self, group, text):
        self.scheduler.spawn(self._send(group, text))

    async def _send(self, group, message):
        try:
            await self.session.send_message(message, group)
        except RemoteError as e:
            logger.error("[command] reply to %s failed: %s", group, e)

    # Help

    @command("help", ArgShape.NONE, "", "show this list")
    def _help(self, group):
        prefix = self.registry.prefix
        lines = [replies.HELP_HEADER.format(prefix=prefix)]
        for spec in COMMANDS.values():
            lines.append(replies.HELP_LINE.format(prefix=prefix, name=spec.name, hint=spec.hint, summary=spec.summary))
        self.reply(group, "\n".join(lines))

    # Title lock

    @command("lockname", ArgShape.TEXT, " <Group Name>", "lock group title")
    def _lockname(self, group, title):
        # Lock first; a failed remote call does not undo it.
        self.registry.set_locked_title(group, title)
        self.scheduler.spawn(self._apply_title(group, title))

    async def _apply_title(self, group, title):
        try:
            await self.session.set_title(title, group)
        except RemoteError as e:
            logger.warning("[command] set title in %s failed: %s", group, e)
            await self._send(group, replies.TITLE_LOCK_FAILED.format(error=e))
        else:
            await self._send(group, replies.TITLE_LOCKED.format(title=title))

    @command("unlockname", ArgShape.NONE, "", "remove group-name lock")
    def _unlockname(self, group):
        if self.registry.clear_locked_title(group):
            self.reply(group, replies.TITLE_UNLOCKED)
        else:
            self.reply(group, replies.NO_TITLE_LOCK)

    # Nickname locks

    @command("locknick", ArgShape.TOKEN_TEXT, " <UID> <Nickname>", "lock nickname for UID")
    def _locknick(self, group, member, nickname):
        self.registry.set_locked_nickname(group, member, nickname)
        self.scheduler.spawn(self._apply_nickname(group, member, nickname))

    async def _apply_nickname(self, group, member, nickname):
        try:
            await self.session.set_nickname(nickname, group, member)
        except RemoteError as e:
            logger.warning("[command] set nickname of %s in %s failed: %s", member, group, e)
            await self._send(group, replies.NICK_LOCK_FAILED.format(error=e))
        else:
            await self._send(group, replies.NICK_LOCKED.format(member=member, nickname=nickname))

    @command("unlocknick", ArgShape.TOKEN, " <UID>", "unlock nickname for UID")
    def _unlocknick(self, group, member):
        if self.registry.clear_locked_nickname(group, member):
            self.reply(group, replies.NICK_UNLOCKED.format(member=member))
        else:
            self.reply(group, replies.NO_NICK_LOCK)

    # Message corpus

    @command("msg", ArgShape.TOKEN, " <UID>", "send a random message (mentions target)")
    def _msg(self, group, member):
        self.corpus.load()
        message = OutboundMessage(self.corpus.choice(self.rng), mentions=(Mention(member),))
        self.scheduler.spawn(self._deliver(group, message))

    async def _deliver(self, group, message):
        try:
            await self.session.send_message(message, group)
        except RemoteError as e:
            logger.warning("[command] msg to %s failed: %s", group, e)
            await self._send(group, replies.SEND_FAILED.format(error=e))

    @command("addmsg", ArgShape.TEXT, " <text>", "add message to messages.txt")
    def _addmsg(self, group, text):
        self.corpus.append(text)
        self.reply(group, replies.MESSAGE_ADDED)

    @command("delmsg", ArgShape.TOKEN, " <index>", "delete message index (use listmsgs to see indices)")
    def _delmsg(self, group, raw_index):
        if not re.fullmatch(r"-?\d+", raw_index, re.ASCII):
            self.reply(group, replies.INVALID_INDEX)
            return
        index = int(raw_index)
        try:
            removed = self.corpus.remove_at(index)
        except IndexOutOfRange:
            self.reply(group, replies.INVALID_INDEX)
            return
        self.reply(group, replies.MESSAGE_DELETED.format(index=index, text=removed))

    @command("listmsgs", ArgShape.NONE, "", "list messages")
    def _listmsgs(self, group):
        self.corpus.load()
        self.reply(group, replies.format_messages(self.corpus.entries()))

    @command("reloadmsgs", ArgShape.NONE, "", "reload messages.txt from disk")
    def _reloadmsgs(self, group):
        count = self.corpus.load()
        self.reply(group, replies.MESSAGES_RELOADED.format(count=count))

    # Settings

    @command("setprefix", ArgShape.TOKEN, " <newPrefix>", "change command prefix")
    def _setprefix(self, group, prefix):
        self.registry.set_prefix(prefix)
        self.reply(group, replies.PREFIX_CHANGED.format(prefix=prefix))

    @command("setadmin", ArgShape.TOKEN, " <UID>", "change admin UID to UID (transfer admin)")
    def _setadmin(self, group, uid):
        self.registry.set_admin(uid)
        logger.info("[command] admin transferred to %s", uid)
        self.reply(group, replies.ADMIN_CHANGED.format(admin=uid))

    # Overview

    @command("listlocks", ArgShape.NONE, "", "show current locks")
    def _listlocks(self, group):
        self.reply(group, replies.format_locks(self.registry.list_locks(group)))

    @command("unlockall", ArgShape.NONE, "", "remove all locks in this thread")
    def _unlockall(self, group):
        if self.registry.clear_all_locks(group):
            self.reply(group, replies.ALL_UNLOCKED)
        else:
            self.reply(group, replies.NO_LOCKS)
