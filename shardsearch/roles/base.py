"""
Shared participant behaviour.

Coordinator and Worker both own one channel endpoint, run exactly one
profiled filter pass over their shard, and report it as a ParticipantTiming.
"""

from __future__ import annotations

import abc
from typing import List, Sequence, Tuple

from shardsearch.channel.base import MessageChannel
from shardsearch.config import MalformedPolicy
from shardsearch.domain.models import ParticipantTiming, Record, Role
from shardsearch.protocol.codec import ensure_policy
from shardsearch.protocol.filter import filter_records
from shardsearch.utils.logging import get_logger
from shardsearch.utils.profiler import profile_block

log = get_logger(__name__)


class Participant(abc.ABC):
    """
    One member of the process group.

    Subclasses set `role` and expose their own entry point (`run` or `serve`).
    """

    role: Role

    def __init__(self, channel: MessageChannel, malformed_policy: MalformedPolicy = "skip") -> None:
        self.channel = channel
        self.malformed_policy = ensure_policy(malformed_policy)

    @property
    def rank(self) -> int:
        return self.channel.rank

    def _filter_pass(self, records: Sequence[Record], term: str) -> Tuple[List[str], ParticipantTiming]:
        with profile_block(f"participant-{self.rank}/filter") as stats:
            matches = filter_records(records, term)

        timing = ParticipantTiming(
            rank=self.rank,
            role=self.role,
            records_scanned=len(records),
            matches=len(matches),
            duration_seconds=stats.duration_seconds,
            peak_rss_bytes=stats.peak_rss_bytes,
            cpu_percent=stats.cpu_percent,
        )
        log.info(
            f"[FILTER] {self.role.value} scanned {len(records)} records",
            extra={"records": len(records), "matches": len(matches), "duration": stats.duration_seconds},
        )
        return matches, timing


__all__ = ["Participant"]
