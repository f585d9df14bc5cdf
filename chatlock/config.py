"""Configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

from chatlock.core.errors import ConfigError

load_dotenv()


# Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_BOT_TOKEN_FILE = os.getenv("TELEGRAM_BOT_TOKEN_FILE", "")

# Bootstrap values, used only when lockdata.json has none
ADMIN_UID = os.getenv("ADMIN_UID", "")
PREFIX = os.getenv("PREFIX", "!")

# State files
DATA_DIR = os.getenv("DATA_DIR", "./data")
LOCK_FILE = os.getenv("LOCK_FILE", os.path.join(DATA_DIR, "lockdata.json"))
MSG_FILE = os.getenv("MSG_FILE", os.path.join(DATA_DIR, "messages.txt"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def load_token(token=None, token_file=None):
    """Return the bot token from the environment or from a token file."""
    token = TELEGRAM_BOT_TOKEN if token is None else token
    token_file = TELEGRAM_BOT_TOKEN_FILE if token_file is None else token_file

    if token.strip():
        return token.strip()
    if token_file:
        try:
            with open(token_file, encoding="utf-8") as f:
                from_file = f.read().strip()
        except OSError as e:
            raise ConfigError(f"Cannot read TELEGRAM_BOT_TOKEN_FILE {token_file}: {e}") from e
        if from_file:
            return from_file
        raise ConfigError(f"TELEGRAM_BOT_TOKEN_FILE {token_file} is empty")
    raise ConfigError("No bot token found. Set TELEGRAM_BOT_TOKEN or TELEGRAM_BOT_TOKEN_FILE in .env")
