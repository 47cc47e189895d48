# standoff/engine/__init__.py
"""Duel rules: config resolution, turn resolution and round lifecycle.

Nothing in here knows about sockets or timers; the server drives it.
"""
