"""Message corpus for the msg command, stored as messages.txt (one per line)."""

import logging
import re
from pathlib import Path

from chatlock.core.errors import IndexOutOfRange, PersistenceError
from chatlock.memory.storage import write_text_atomic

logger = logging.getLogger(__name__)

PLACEHOLDER = "⚠️ No messages found. Edit messages.txt or use addmsg command."

_LINE_SPLIT = re.compile(r"\r?\n")


class MessageCorpus:
    def __init__(self, path):
        self.path = Path(path)
        self._messages = []
        # True while _messages holds only PLACEHOLDER, which is never saved
        self._placeholder = False
        # Set when the file exists but could not be read; saving would clobber it
        self._unreadable = False

    def __len__(self):
        return len(self._messages)

    def load(self):
        """Replace the in-memory list with the file's contents. Never writes."""
        messages = []
        self._unreadable = False
        try:
            raw = self.path.read_text(encoding="utf-8", errors="replace")
            messages = [line.strip() for line in _LINE_SPLIT.split(raw) if line.strip()]
        except FileNotFoundError:
            pass
        except OSError as e:
            self._unreadable = True
            logger.error("[corpus] error loading messages from %s: %s", self.path, e)

        self._placeholder = not messages
        self._messages = messages or [PLACEHOLDER]
        return len(self._messages)

    def append(self, text):
        if self._placeholder:
            self._messages = []
            self._placeholder = False
        self._messages.append(text)
        self._save()

    def remove_at(self, index):
        """Remove and return the entry at 1-based index."""
        if index < 1 or index > len(self._messages):
            raise IndexOutOfRange(index, len(self._messages))
        removed = self._messages.pop(index - 1)
        if self._placeholder:
            self._placeholder = False
        self._save()
        return removed

    def entries(self):
        return list(enumerate(self._messages, start=1))

    def choice(self, rng):
        return rng.choice(self._messages)

    def _save(self):
        if self._unreadable:
            logger.error("[corpus] not saving: %s could not be read, fix it and use reloadmsgs", self.path)
            return
        try:
            write_text_atomic(self.path, "\n".join(self._messages))
        except PersistenceError as e:
            logger.error("[corpus] error saving messages: %s", e)
