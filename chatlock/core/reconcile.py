"""Puts locked titles and nicknames back after someone else changes them.

Each qualifying change schedules its own correction RESET_DELAY_SECONDS
later; there is no coalescing and no retry. A failed correction is only
logged, and the lock stays declared.
"""

import logging

from chatlock.core.errors import RemoteError
from chatlock.core.events import ChangeKind

logger = logging.getLogger(__name__)

RESET_DELAY_SECONDS = 1.0


class Reconciler:
    def __init__(self, registry, session, scheduler):
        self.registry = registry
        self.session = session
        self.scheduler = scheduler

    def observe(self, event):
        """Schedule a correction if the changed attribute is locked."""
        if event.kind is ChangeKind.TITLE:
            title = self.registry.locked_title(event.group)
            if title is None:
                logger.debug("[reconcile] title of %s changed, not locked", event.group)
                return False
            self.scheduler.call_later(RESET_DELAY_SECONDS, lambda: self._reset_title(event.group, title))
            return True

        if event.kind is ChangeKind.NICKNAME:
            nickname = self.registry.locked_nickname(event.group, event.member) if event.member else None
            if nickname is None:
                logger.debug("[reconcile] nickname of %s in %s changed, not locked", event.member, event.group)
                return False
            self.scheduler.call_later(
                RESET_DELAY_SECONDS, lambda: self._reset_nickname(event.group, event.member, nickname)
            )
            return True

        return False

    async def _reset_title(self, group, title):
        try:
            await self.session.set_title(title, group)
        except RemoteError as e:
            logger.error("[reconcile] failed resetting title in %s: %s", group, e)
        else:
            logger.info('[reconcile] reset group title to "%s" in %s', title, group)

    async def _reset_nickname(self, group, member, nickname):
        try:
            await self.session.set_nickname(nickname, group, member)
        except RemoteError as e:
            logger.error("[reconcile] failed resetting nick of %s in %s: %s", member, group, e)
        else:
            logger.info("[reconcile] reset nick %s -> %s in %s", member, nickname, group)
