import logging

from chatlock.core.commands import CommandDispatcher
from chatlock.core.events import AttributeChange, CommandCandidate, InboundEvent
from chatlock.core.reconcile import Reconciler

logger = logging.getLogger(__name__)


class LockEngine:
    """Owns the registry and corpus and routes every inbound event.

    Events are handled one at a time; handle() never awaits, so no two
    events ever interleave their state changes.
    """

    def __init__(self, registry, corpus, session, scheduler, rng=None):
        self.registry = registry
        self.corpus = corpus
        self.scheduler = scheduler
        self.dispatcher = CommandDispatcher(registry, corpus, session, scheduler, rng=rng)
        self.reconciler = Reconciler(registry, session, scheduler)

    def handle(self, event: InboundEvent):
        try:
            if isinstance(event, CommandCandidate):
                self.dispatcher.dispatch(event)
            elif isinstance(event, AttributeChange):
                self.reconciler.observe(event)
            else:
                logger.debug("[engine] ignoring %r", event)
        except Exception:
            logger.exception("[engine] error handling %r", event)

    async def consume(self, events):
        """Handle an async stream of events in arrival order until it ends.

        The bot feeds handle() directly from its update handlers; this is the
        entry point for tests and other transports that produce an event stream.
        """
        async for event in events:
            self.handle(event)

    async def drain(self):
        await self.scheduler.drain()
