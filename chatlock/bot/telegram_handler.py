from telegram import Update
from telegram.ext import Application, ChatMemberHandler, ContextTypes, MessageHandler, filters

from chatlock.core.events import AttributeChange, ChangeKind, CommandCandidate

ENGINE_KEY = "engine"


def _engine(context):
    return context.bot_data[ENGINE_KEY]


def _from_self(user, context):
    return user is not None and user.id == context.bot.id


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Pass text messages on as command candidates; the engine checks admin and prefix."""
    message = update.effective_message
    user = update.effective_user
    if message is None or not message.text or user is None or update.effective_chat is None:
        return

    _engine(context).handle(CommandCandidate(
        sender=str(user.id),
        group=str(update.effective_chat.id),
        text=message.text,
    ))


async def handle_title_change(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the 'changed the group name' service message."""
    if update.effective_chat is None or _from_self(update.effective_user, context):
        return

    _engine(context).handle(AttributeChange(ChangeKind.TITLE, group=str(update.effective_chat.id)))


async def handle_member_update(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle chat_member updates where an admin's custom title changed."""
    change = update.chat_member
    if change is None or _from_self(change.from_user, context):
        return

    old_title = getattr(change.old_chat_member, "custom_title", None)
    new_title = getattr(change.new_chat_member, "custom_title", None)
    if old_title == new_title:
        return

    _engine(context).handle(AttributeChange(
        ChangeKind.NICKNAME,
        group=str(change.chat.id),
        member=str(change.new_chat_member.user.id),
    ))


def register_handlers(app: Application, engine):
    app.bot_data[ENGINE_KEY] = engine
    app.add_handler(MessageHandler(filters.StatusUpdate.NEW_CHAT_TITLE, handle_title_change))
    # edited_message updates would run a command a second time
    app.add_handler(MessageHandler(filters.UpdateType.MESSAGE & filters.TEXT, handle_message))
    app.add_handler(ChatMemberHandler(handle_member_update, ChatMemberHandler.CHAT_MEMBER))
