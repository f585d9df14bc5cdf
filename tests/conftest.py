import random

import pytest

from chatlock.core.engine import LockEngine
from chatlock.core.errors import RemoteError
from chatlock.core.events import CommandCandidate
from chatlock.core.session import OutboundMessage
from chatlock.memory.lock_registry import LockRegistry
from chatlock.memory.message_corpus import MessageCorpus
from chatlock.scheduler.timers import VirtualScheduler

ADMIN = "7"
GROUP = "G1"


class FakeChatSession:
    """Records every remote call.

    Method names added to `failing` raise RemoteError; "mentions" fails only
    messages that carry mentions.
    """

    def __init__(self):
        self.sent = []
        self.titles = []
        self.nicknames = []
        self.failing = set()

    async def send_message(self, message, group):
        if "send_message" in self.failing:
            raise RemoteError("send blocked")
        if "mentions" in self.failing and isinstance(message, OutboundMessage):
            raise RemoteError("mention rejected")
        self.sent.append((message, group))

    async def set_title(self, title, group):
        if "set_title" in self.failing:
            raise RemoteError("not enough rights")
        self.titles.append((title, group))

    async def set_nickname(self, nickname, group, member):
        if "set_nickname" in self.failing:
            raise RemoteError("user is not an administrator")
        self.nicknames.append((nickname, group, member))

    def replies(self, group=GROUP):
        return [m for m, g in self.sent if g == group and isinstance(m, str)]

    def last_reply(self, group=GROUP):
        found = self.replies(group)
        return found[-1] if found else None

    def outbound(self):
        return [m for m, _ in self.sent if isinstance(m, OutboundMessage)]


@pytest.fixture
def session():
    return FakeChatSession()


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def lock_file(tmp_path):
    return tmp_path / "lockdata.json"


@pytest.fixture
def msg_file(tmp_path):
    return tmp_path / "messages.txt"


@pytest.fixture
def registry(lock_file):
    return LockRegistry.load(lock_file, default_admin=ADMIN, default_prefix="!")


@pytest.fixture
def corpus(msg_file):
    corpus = MessageCorpus(msg_file)
    corpus.load()
    return corpus


@pytest.fixture
def engine(registry, corpus, session, scheduler):
    return LockEngine(registry, corpus, session, scheduler, rng=random.Random(0))


@pytest.fixture
def say(engine):
    """Send a chat message through the engine and wait for its remote calls."""

    async def _say(text, sender=ADMIN, group=GROUP):
        engine.handle(CommandCandidate(sender=sender, group=group, text=text))
        await engine.drain()

    return _say
