"""
Message channel package for shardsearch.

Re-exports the channel interface and the two transports so downstream code
can import from `shardsearch.channel` directly.
"""

from shardsearch.channel.base import DEFAULT_MAX_FRAME_BYTES, AbstractChannel, MessageChannel
from shardsearch.channel.memory import InMemoryChannel, InMemoryNetwork
from shardsearch.channel.pipe import PipeChannel

__all__ = [
    # Abstracts
    "AbstractChannel",
    "DEFAULT_MAX_FRAME_BYTES",
    "MessageChannel",
    # Transports
    "InMemoryChannel",
    "InMemoryNetwork",
    "PipeChannel",
]
