import logging
import sys

from telegram import Update
from telegram.error import InvalidToken
from telegram.ext import Application

from chatlock.config import ADMIN_UID, LOCK_FILE, LOG_LEVEL, MSG_FILE, PREFIX, load_token
from chatlock.bot.telegram_handler import register_handlers
from chatlock.core.engine import LockEngine
from chatlock.core.errors import AuthError, ConfigError
from chatlock.integrations.telegram_chat import TelegramChatSession
from chatlock.memory.lock_registry import LockRegistry
from chatlock.memory.message_corpus import MessageCorpus
from chatlock.scheduler.timers import AsyncioScheduler


def _setup_logging():
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=LOG_LEVEL.upper(),
    )
    # httpx logs every Bot API request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_application(token, registry, corpus):
    app = Application.builder().token(token).build()
    engine = LockEngine(registry, corpus, TelegramChatSession(app.bot), AsyncioScheduler())
    register_handlers(app, engine)
    return app


def run(app):
    try:
        app.run_polling(allowed_updates=Update.ALL_TYPES)
    except InvalidToken as e:
        raise AuthError(f"Telegram rejected the bot token: {e}") from e


def main():
    _setup_logging()

    try:
        token = load_token()
        registry = LockRegistry.load(LOCK_FILE, default_admin=ADMIN_UID, default_prefix=PREFIX)
    except ConfigError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    corpus = MessageCorpus(MSG_FILE)
    corpus.load()

    print("Starting chatlock...")
    print(f"Admin UID: {registry.admin or '(not set)'}")
    print(f"Command prefix: {registry.prefix}")
    print(f"Lock data: {LOCK_FILE}")
    print(f"Messages: {MSG_FILE} ({len(corpus)} loaded)")

    app = build_application(token, registry, corpus)

    print("Bot is running. Send a command in a group chat.")
    try:
        run(app)
    except AuthError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
