"""Lock registry: which group titles and member nicknames are enforced.

Backed by a single JSON document (lockdata.json). Every mutation is
flushed to disk before it returns; a failed flush is logged and the
in-memory copy stays authoritative for the running process.
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from chatlock.core.errors import ConfigError, PersistenceError
from chatlock.memory.storage import write_json_atomic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockSnapshot:
    """Locks of one group, detached from the registry."""

    title: str | None = None
    nicknames: dict[str, str] = field(default_factory=dict)

    @property
    def empty(self):
        return self.title is None and not self.nicknames


class LockRegistry:
    def __init__(self, path, admin="", prefix="!", locked_titles=None, locked_nicknames=None):
        self.path = Path(path)
        self._admin = str(admin)
        self._prefix = str(prefix)
        self._titles = dict(locked_titles or {})
        self._nicknames = {g: dict(m) for g, m in (locked_nicknames or {}).items() if m}

    @classmethod
    def load(cls, path, default_admin="", default_prefix="!"):
        """Read lockdata.json, or start empty if it does not exist yet."""
        path = Path(path)
        if not path.exists():
            logger.info("[registry] %s not found, starting with no locks", path)
            return cls(path, admin=default_admin, prefix=default_prefix)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot load lock data from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Lock data in {path} is not a JSON object")

        titles = data.get("lockedNames") or {}
        nicknames = data.get("lockedNicks") or {}
        settings = data.get("settings") or {}
        if not isinstance(titles, dict) or not isinstance(nicknames, dict) or not isinstance(settings, dict):
            raise ConfigError(f"Lock data in {path} has an unexpected shape")
        if not all(isinstance(m, dict) for m in nicknames.values()):
            raise ConfigError(f"Nickname locks in {path} must map group -> {{member: nickname}}")

        registry = cls(
            path,
            admin=settings.get("admin") or default_admin,
            prefix=settings.get("prefix") or default_prefix,
            locked_titles={str(g): str(t) for g, t in titles.items()},
            locked_nicknames={
                str(g): {str(u): str(n) for u, n in members.items()}
                for g, members in nicknames.items()
            },
        )
        logger.info(
            "[registry] loaded %d title lock(s), %d nickname lock(s) from %s",
            len(registry._titles),
            sum(len(m) for m in registry._nicknames.values()),
            path,
        )
        return registry

    def to_document(self):
        return {
            "lockedNames": dict(self._titles),
            "lockedNicks": copy.deepcopy(self._nicknames),
            "settings": {"admin": self._admin, "prefix": self._prefix},
        }

    def flush(self):
        try:
            write_json_atomic(self.path, self.to_document())
        except PersistenceError as e:
            logger.error("[registry] error saving lock data: %s", e)

    # Titles

    def locked_title(self, group):
        return self._titles.get(group)

    def set_locked_title(self, group, title):
        self._titles[group] = title
        self.flush()

    def clear_locked_title(self, group):
        if group not in self._titles:
            return False
        del self._titles[group]
        self.flush()
        return True

    # Nicknames

    def locked_nickname(self, group, member):
        return self._nicknames.get(group, {}).get(member)

    def set_locked_nickname(self, group, member, nickname):
        self._nicknames.setdefault(group, {})[member] = nickname
        self.flush()

    def clear_locked_nickname(self, group, member):
        members = self._nicknames.get(group)
        if not members or member not in members:
            return False
        del members[member]
        if not members:
            del self._nicknames[group]
        self.flush()
        return True

    # Whole group

    def list_locks(self, group):
        return LockSnapshot(
            title=self._titles.get(group),
            nicknames=dict(self._nicknames.get(group, {})),
        )

    def clear_all_locks(self, group):
        had_title = self._titles.pop(group, None) is not None
        had_nicks = self._nicknames.pop(group, None) is not None
        if not (had_title or had_nicks):
            return False
        self.flush()
        return True

    # Settings

    @property
    def admin(self):
        return self._admin

    def set_admin(self, uid):
        self._admin = str(uid)
        self.flush()

    @property
    def prefix(self):
        return self._prefix

    def set_prefix(self, prefix):
        self._prefix = str(prefix)
        self.flush()
