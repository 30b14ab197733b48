"""Command classification for message text.

Rules are exact and case-sensitive, first match wins:

    "error"            -> FAULT
    "slow"             -> SLOW
    "save <payload>"   -> SAVE, payload is everything after "save "
    "load..."          -> LOAD, any text starting with "load"
    anything else      -> ECHO, payload is the whole text
"""

from probebot.dispatcher.models import Command, CommandMatch

FAULT_TEXT = "error"
SLOW_TEXT = "slow"
SAVE_PREFIX = "save "
LOAD_PREFIX = "load"


def classify_command(text: str) -> CommandMatch:
    """Classify message text into exactly one command."""
    if text == FAULT_TEXT:
        return CommandMatch(command=Command.FAULT)
    if text == SLOW_TEXT:
        return CommandMatch(command=Command.SLOW)
    if text.startswith(SAVE_PREFIX):
        return CommandMatch(command=Command.SAVE, payload=text[len(SAVE_PREFIX):])
    # "loader" matches too; the prefix carries no trailing space
    if text.startswith(LOAD_PREFIX):
        return CommandMatch(command=Command.LOAD)
    return CommandMatch(command=Command.ECHO, payload=text)
