"""
Parsing of inbound text and button payloads: command words, retrieval
tokens, callback data, category names and free-text intents.
"""
import re
from enum import Enum

# Telegram rejects callback_data longer than 64 bytes
MAX_CALLBACK_DATA_BYTES = 64

CALLBACK_SEPARATOR = ":"

COMMAND_PATTERN = re.compile(r'^/([A-Za-z0-9_]+)(?:@[A-Za-z0-9_]+)?(?:\s+(.*))?$', re.DOTALL)
RETRIEVAL_TOKEN_PATTERN = re.compile(r'post=(\S+)')
CATEGORY_PATTERN = re.compile(r'^[a-z0-9_ -]{1,32}$')

CANCEL_WORDS = ("cancel",)
CONFIRM_WORDS = ("confirm", "yes")


class Command(str, Enum):
    START = "start"
    HELP = "help"
    SAVE = "save"
    FILES = "files"
    DELETE = "delete"
    STATS = "stats"
    CANCEL = "cancel"
    BROWSE = "browse"


class CallbackAction(str, Enum):
    FILE = "file"
    PAGE = "page"
    CATEGORY = "category"
    DELETE = "delete"
    CONFIRM = "confirm"


class Intent(str, Enum):
    GREETING = "greeting"
    MY_FILES = "my_files"
    STATS = "stats"
    HELP = "help"


# Checked in order; the first intent with a matching keyword wins
INTENT_KEYWORDS = (
    (Intent.GREETING, ("hello", "hi", "hey")),
    (Intent.MY_FILES, ("my files", "my uploads")),
    (Intent.STATS, ("stats", "statistics")),
    (Intent.HELP, ("help",)),
)


class CallbackDataError(ValueError):
    """Raised for button payloads that cannot be parsed or built"""
    pass


def parse_command(text):
    """
    Splits "/Name@botname args" into ("name", "args").
    Returns None when text is not a command.
    """
    if not text:
        return None
    match = COMMAND_PATTERN.match(text.strip())
    if not match:
        return None
    name, args = match.groups()
    return name.lower(), (args or "").strip()


def parse_retrieval_token(args):
    """Returns the file id of a `post=<id>` token, or None."""
    match = RETRIEVAL_TOKEN_PATTERN.search(args or "")
    return match.group(1) if match else None


def parse_callback_data(data):
    """
    Splits "action:param1:param2" into (CallbackAction, [params]).
    """
    if not data:
        raise CallbackDataError("Empty callback data")
    action, *params = data.split(CALLBACK_SEPARATOR)
    try:
        return CallbackAction(action), params
    except ValueError as e:
        raise CallbackDataError(f"Unknown callback action: {action!r}") from e


def build_callback_data(action: CallbackAction, *params):
    data = CALLBACK_SEPARATOR.join([CallbackAction(action).value, *(str(p) for p in params)])
    if len(data.encode('utf-8')) > MAX_CALLBACK_DATA_BYTES:
        raise CallbackDataError(f"Callback data too long: {data!r}")
    return data


def param(params, index):
    try:
        return params[index]
    except IndexError as e:
        raise CallbackDataError(f"Missing callback parameter #{index}") from e


def page_param(params, index):
    value = param(params, index)
    try:
        return int(value)
    except ValueError as e:
        raise CallbackDataError(f"Invalid page number: {value!r}") from e


def normalize_category(text):
    """
    Lower-cases and collapses whitespace. Returns None for names that are
    empty, too long, use other characters or are reserved words.
    """
    name = " ".join((text or "").split()).lower()
    if not CATEGORY_PATTERN.match(name) or name in CANCEL_WORDS:
        return None
    return name


def match_intent(text):
    text = (text or "").lower()
    for intent, keywords in INTENT_KEYWORDS:
        for keyword in keywords:
            if re.search(rf'\b{re.escape(keyword)}\b', text):
                return intent
    return None
