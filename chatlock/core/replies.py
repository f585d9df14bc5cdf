HELP_HEADER = "📘 Commands (prefix = {prefix})"
HELP_LINE = "{prefix}{name}{hint} — {summary}"

USAGE = "Usage: {prefix}{command}{hint}"
UNKNOWN_COMMAND = "Unknown command. Use {prefix}help"

TITLE_LOCKED = "🔒 Group name locked to: {title}"
TITLE_LOCK_FAILED = "Error setting title: {error}"
TITLE_UNLOCKED = "🔓 Group name lock removed for this thread."
NO_TITLE_LOCK = "No group-name lock set for this thread."

NICK_LOCKED = "🔒 Nick locked for {member}: {nickname}"
NICK_LOCK_FAILED = "Error set nick: {error}"
NICK_UNLOCKED = "🔓 Nick lock removed for {member}"
NO_NICK_LOCK = "No nick lock for that UID in this thread."

SEND_FAILED = "Error sending message: {error}"

MESSAGE_ADDED = "✅ Message added. Use listmsgs to view."
MESSAGE_DELETED = "Deleted message #{index}: {text}"
INVALID_INDEX = "Invalid index."
MESSAGES_HEADER = "📋 Messages:"
NO_MESSAGES = "No messages."
MESSAGES_RELOADED = "🔄 messages.txt reloaded. Total: {count}"

PREFIX_CHANGED = "✅ Prefix changed to: {prefix}"
ADMIN_CHANGED = "✅ Admin changed to UID: {admin}"

LOCKS_HEADER = "🔐 Locks for this thread:"
LOCKS_TITLE = "Group: {title}"
LOCKS_NO_TITLE = "Group: (none)"
LOCKS_NICK_HEADER = "Nick locks:"
LOCKS_NICK_LINE = "{member} -> {nickname}"
LOCKS_NO_NICKS = "(no nick locks)"
ALL_UNLOCKED = "🔓 All locks removed for this thread."
NO_LOCKS = "No locks set for this thread."


def format_locks(snapshot):
    lines = [LOCKS_HEADER]
    lines.append(LOCKS_TITLE.format(title=snapshot.title) if snapshot.title is not None else LOCKS_NO_TITLE)
    lines.append(LOCKS_NICK_HEADER)
    if snapshot.nicknames:
        for member, nickname in snapshot.nicknames.items():
            lines.append(LOCKS_NICK_LINE.format(member=member, nickname=nickname))
    else:
        lines.append(LOCKS_NO_NICKS)
    return "\n".join(lines)


def format_messages(entries):
    if not entries:
        return NO_MESSAGES
    return "\n".join([MESSAGES_HEADER] + [f"{i}. {text}" for i, text in entries])
