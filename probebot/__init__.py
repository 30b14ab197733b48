"""probebot: diagnostic conversational bot.

Dispatches inbound turns to echo, fault injection, latency simulation
and message store commands, with telemetry for every turn.
"""

__version__ = "1.0.0"
