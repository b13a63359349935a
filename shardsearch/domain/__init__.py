"""
Domain package for shardsearch.

Exports the core data definitions shared by the protocol, the roles and the
launcher. Keep this package free of I/O.
"""

from shardsearch.domain.models import (
    COORDINATOR_RANK,
    ParticipantTiming,
    Record,
    Role,
    RunResult,
    Shard,
)

__all__ = [
    "COORDINATOR_RANK",
    "ParticipantTiming",
    "Record",
    "Role",
    "RunResult",
    "Shard",
]
