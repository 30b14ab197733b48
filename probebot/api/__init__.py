"""HTTP surface for the turn dispatcher.

Run with ``uvicorn probebot.api.app:app``.
"""
