"""
Domain models for shardsearch.

Defines the record schema shipped between participants, the shard ranges
produced by the partitioner, participant roles, and the per-run result
contract returned to the CLI.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

COORDINATOR_RANK = 0


class Record(BaseModel):
    """
    A single entry of the record set, e.g. a phonebook contact.
    """

    primary_field: str = Field(..., description="Search key (e.g. contact name).")
    secondary_field: str = Field(..., description="Opaque payload (e.g. phone number).")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class Role(str, enum.Enum):
    COORDINATOR = "coordinator"
    WORKER = "worker"

    @classmethod
    def for_rank(cls, rank: int) -> Role:
        return cls.COORDINATOR if rank == COORDINATOR_RANK else cls.WORKER


@dataclass(frozen=True)
class Shard:
    """Half-open index range ``[start, end)`` of the record set owned by one participant."""

    owner: int
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def as_slice(self) -> slice:
        return slice(self.start, self.end)


@dataclass(frozen=True)
class ParticipantTiming:
    """Measurements of one participant's filter pass."""

    rank: int
    role: Role
    records_scanned: int
    matches: int
    duration_seconds: float
    peak_rss_bytes: Optional[int] = None
    cpu_percent: Optional[float] = None

    def line(self) -> str:
        return f"Participant {self.rank} ({self.role.value}) took {self.duration_seconds:f} seconds."


@dataclass
class RunResult:
    """
    Outcome of one coordinated search.

    `matches` is already in coordinator-then-ascending-worker order.
    """

    matches: List[str] = field(default_factory=list)
    timings: List[ParticipantTiming] = field(default_factory=list)
    output_path: Optional[Path] = None

    @property
    def text(self) -> str:
        return "".join(self.matches)


__all__ = [
    "COORDINATOR_RANK",
    "ParticipantTiming",
    "Record",
    "Role",
    "RunResult",
    "Shard",
]
