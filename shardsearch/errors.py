"""
Exception hierarchy for shardsearch.

Every failure a participant can observe derives from ShardSearchError so the
CLI can report it on stderr and exit non-zero without a traceback.
"""

from __future__ import annotations


class ShardSearchError(Exception):
    """Base class for all shardsearch errors."""


class InvalidConfiguration(ShardSearchError):
    """Run parameters are unusable; detected before any distribution."""


class MalformedRecordLine(ShardSearchError):
    """A record line cannot be split into primary and secondary fields."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class ChannelFault(ShardSearchError):
    """A send or receive on the message channel failed. Fatal to the run."""


class FrameError(ChannelFault):
    """A wire frame violates the length-prefix framing rules."""


__all__ = [
    "ShardSearchError",
    "InvalidConfiguration",
    "MalformedRecordLine",
    "ChannelFault",
    "FrameError",
]
