"""Turn dispatching: command classification, handlers and error policy."""

from probebot.dispatcher.classifier import classify_command
from probebot.dispatcher.dispatcher import TurnDispatcher
from probebot.dispatcher.errors import (
    InjectedFault,
    InvalidInput,
    PersistenceFailure,
    TurnError,
    TurnErrorCode,
)
from probebot.dispatcher.host import TurnHost
from probebot.dispatcher.models import Command, CommandMatch, Turn, TurnReply

__all__ = [
    "classify_command",
    "TurnDispatcher",
    "TurnHost",
    "Command",
    "CommandMatch",
    "Turn",
    "TurnReply",
    "TurnError",
    "TurnErrorCode",
    "InjectedFault",
    "InvalidInput",
    "PersistenceFailure",
]
