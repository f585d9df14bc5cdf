import asyncio
import logging

from chatlock.core.events import AttributeChange, ChangeKind, CommandCandidate
from chatlock.core.reconcile import RESET_DELAY_SECONDS

ADMIN = "7"


async def stream(*events):
    for event in events:
        yield event


def test_lock_then_external_change_is_reverted(engine, session, scheduler):
    async def scenario():
        await engine.consume(stream(
            CommandCandidate(ADMIN, "G", "!locknick 42 Bob"),
            AttributeChange(ChangeKind.NICKNAME, group="G", member="42"),
            AttributeChange(ChangeKind.NICKNAME, group="G", member="99"),
        ))
        await engine.drain()
        assert session.nicknames == [("Bob", "G", "42")]
        await scheduler.advance(RESET_DELAY_SECONDS)

    asyncio.run(scenario())

    assert session.nicknames == [("Bob", "G", "42"), ("Bob", "G", "42")]


def test_events_are_handled_in_arrival_order(engine, registry):
    async def scenario():
        await engine.consume(stream(
            CommandCandidate(ADMIN, "G", "!setadmin 8"),
            CommandCandidate(ADMIN, "G", "!lockname ignored"),
            CommandCandidate("8", "G", "!lockname accepted"),
        ))
        await engine.drain()

    asyncio.run(scenario())

    assert registry.locked_title("G") == "accepted"


def test_failing_event_does_not_stop_the_stream(engine, registry, monkeypatch, caplog):
    def explode(event):
        raise RuntimeError("boom")

    monkeypatch.setattr(engine.reconciler, "observe", explode)

    async def scenario():
        await engine.consume(stream(
            AttributeChange(ChangeKind.TITLE, group="G"),
            CommandCandidate(ADMIN, "G", "!lockname still here"),
        ))
        await engine.drain()

    with caplog.at_level(logging.ERROR):
        asyncio.run(scenario())

    assert "boom" in caplog.text
    assert registry.locked_title("G") == "still here"


def test_unknown_event_is_ignored(engine, session):
    engine.handle(object())

    assert session.sent == []
