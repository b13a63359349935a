"""
shardsearch - parallel coordinator/worker record search.

A coordinator loads a record set, splits it into contiguous shards with
ceiling-division chunking, ships each shard to a worker process over a
length-prefixed point-to-point channel, filters its own shard, and merges the
workers' matches in ascending worker order into a single result file.

The package is organised as:

- `shardsearch.protocol`: partitioning, framing, record codec, filter predicate
- `shardsearch.channel`: message channel interface, in-memory and pipe transports
- `shardsearch.roles`: coordinator and worker participants
- `shardsearch.launcher`: process-group startup and teardown
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from shardsearch.config import Settings, get_settings
from shardsearch.domain.models import ParticipantTiming, Record, Role, RunResult, Shard
from shardsearch.errors import (
    ChannelFault,
    FrameError,
    InvalidConfiguration,
    MalformedRecordLine,
    ShardSearchError,
)
from shardsearch.launcher import run_search
from shardsearch.protocol.filter import check
from shardsearch.protocol.partitioner import partition
from shardsearch.roles import Coordinator, Worker
from shardsearch.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "ParticipantTiming",
    "Record",
    "Role",
    "RunResult",
    "Shard",
    # Errors
    "ChannelFault",
    "FrameError",
    "InvalidConfiguration",
    "MalformedRecordLine",
    "ShardSearchError",
    # Protocol and roles
    "Coordinator",
    "Worker",
    "check",
    "partition",
    "run_search",
    # Logging
    "configure_logging",
    "get_logger",
]
