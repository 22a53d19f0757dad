"""
User-facing texts. Everything is sent with Telegram's legacy Markdown, so
values that come from users go through escape_markdown first and are kept
out of bold or code entities, where the escapes would show literally.
"""
from datetime import datetime, timezone

GENERIC_ERROR = "❌ Something went wrong while processing your request. Please try again."
UNAUTHORIZED = "❌ Unauthorized. Only the file owner or an admin can do that."
UNAUTHORIZED_SAVE = "❌ Unauthorized. Only the admin can save files."
SAVE_NEEDS_REPLY = "ℹ️ Please reply to a file message with `/save` to store it."
UNSUPPORTED_FILE = "⚠️ Unsupported file type for saving."
FILE_DATA_ERROR = "❌ Error processing saved file data."
COMMAND_NOT_RECOGNIZED = "😕 Command not recognized. Use `/help` for available commands."
NOT_UNDERSTOOD = "🤔 I didn't understand that. Use `/help` to see what I can do."
NOTHING_TO_CANCEL = "ℹ️ Nothing to cancel."
UPLOAD_CANCELLED = "✖️ Upload cancelled. The file was not saved."
DELETE_CANCELLED = "✖️ Deletion cancelled. The file was kept."
NO_FILES = "📭 You have no saved files yet."
EMPTY_CATEGORY = "📭 No files in this category."
DELETE_USAGE = "ℹ️ Usage: `/delete <file id>`"
BROWSE_USAGE = "ℹ️ Usage: `/browse <category>`"
INVALID_CATEGORY = "⚠️ Category names use 1-32 letters, digits, spaces, `-` or `_`. Try again or /cancel."
CHOOSE_CATEGORY_REMINDER = "ℹ️ A file is waiting for a category. Pick one below, type a name, or /cancel."

ANSWER_SAVED = "Saved"
ANSWER_DELETED = "Deleted"
ANSWER_CANCELLED = "Cancelled"
ANSWER_LINK_READY = "Link ready"
ANSWER_NOT_FOUND = "This file no longer exists."
ANSWER_UNAUTHORIZED = "You are not allowed to do that."
ANSWER_STALE = "This action has expired."
ANSWER_INVALID = "Invalid request."
ANSWER_FAILED = "Something went wrong."


def escape_markdown(text):
    text = str(text)
    for char in ('_', '*', '`', '['):
        text = text.replace(char, f'\\{char}')
    return text


def format_timestamp(epoch_ms):
    if not epoch_ms:
        return "never"
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).strftime('%Y-%m-%d %H:%M UTC')


def welcome(example_link):
    return (
        "*🚀 Welcome to FileStore Bot!*\n\n"
        "Use `/help` to see available commands.\n\n"
        "*How It Works:*\n"
        "- *Admin 👑*: Send a file to the bot (or reply to one with `/save`) and pick a category.\n"
        "- *User 🤖*: Retrieve a stored file using a link like:\n"
        f"  `{example_link}`\n\n"
        "Enjoy the service!"
    )


def help_text(is_admin):
    lines = [
        "*🔍 Help Menu:*\n",
        "*General Commands:*",
        "- `/start` - Show welcome message & instructions",
        "- `/help` - Display this help text",
        "- `/files` - List your saved files",
        "- `/delete <id>` - Delete one of your files",
        "- `/stats` - Show your statistics",
        "- `/cancel` - Abort the current operation",
    ]
    if is_admin:
        lines += [
            "",
            "*Admin Commands:*",
            "- `/save` - Save a file by replying to a file message",
            "- `/browse <category>` - List all files in a category",
        ]
    return "\n".join(lines)


def choose_category(attachment):
    return (
        f"📥 Got a {attachment.kind.value}: {escape_markdown(attachment.display_name)}\n\n"
        "Choose a category below or type a new one."
    )


def file_saved(link, category):
    return (
        "✅ *File Saved Successfully!*\n\n"
        f"🏷 Category: {escape_markdown(category)}\n"
        f"📁 Access it using:\n`{link}`"
    )


def file_not_found(file_id):
    return f"❌ No file found for post ID: {escape_markdown(file_id)}"


def share_link(record, link):
    return f"🔗 {escape_markdown(record.display_name)}\n\n`{link}`"


def confirm_delete(record):
    return (
        f"🗑 Delete {escape_markdown(record.display_name)} "
        f"({record.kind}, {record.access_count} download(s))?\n\n"
        "Reply `confirm` or use the buttons below. Anything else cancels."
    )


def file_deleted(record):
    return f"🗑 {escape_markdown(record.display_name)} was deleted."


def file_list(title, page):
    lines = [f"{escape_markdown(title)} (page {page.number}/{page.total_pages}, {page.total_items} file(s))\n"]
    for position, record in enumerate(page.items, start=page.offset + 1):
        lines.append(
            f"{position}. {escape_markdown(record.display_name)} "
            f"({escape_markdown(record.category)}) - {record.access_count} download(s)"
        )
    return "\n".join(lines)


def admin_stats(summary, top_files):
    lines = [
        "*📊 Bot statistics*\n",
        f"👥 Users: {summary['distinct_users']}",
        f"⚡️ Total actions: {summary['total_actions']}",
        f"📅 Actions today: {summary['today'].get('total', 0)}",
        "",
        "*Most downloaded files:*",
    ]
    if not top_files:
        lines.append("_none yet_")
    for position, record in enumerate(top_files, start=1):
        lines.append(f"{position}. {escape_markdown(record.display_name)} - {record.access_count} download(s)")
    return "\n".join(lines)


def user_stats(file_count, session, usage):
    return (
        "*📊 Your statistics*\n\n"
        f"📁 Saved files: {file_count}\n"
        f"⚡️ Actions: {usage.get('count', 0)}\n"
        f"🕐 First seen: {format_timestamp(session.created_at)}\n"
        f"🕑 Last active: {format_timestamp(session.last_active_at)}"
    )
