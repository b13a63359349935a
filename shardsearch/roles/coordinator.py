"""
Coordinator role: load, partition, distribute, filter locally, collect, merge.

The coordinator is always participant 0 and owns the first shard. Worker
results are collected in strictly ascending rank order, whatever order they
actually arrive in, so the merged output is deterministic.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from shardsearch.channel.base import MessageChannel
from shardsearch.config import MalformedPolicy
from shardsearch.domain.models import COORDINATOR_RANK, Record, Role, RunResult, Shard
from shardsearch.errors import InvalidConfiguration
from shardsearch.protocol.codec import decode_matches, encode_records
from shardsearch.protocol.partitioner import partition
from shardsearch.roles.base import Participant
from shardsearch.sources import load_records
from shardsearch.utils.logging import get_logger

log = get_logger(__name__)


class Coordinator(Participant):
    role = Role.COORDINATOR

    def __init__(
        self,
        channel: MessageChannel,
        output_path: Optional[Path | str] = None,
        malformed_policy: MalformedPolicy = "skip",
    ) -> None:
        if channel.rank != COORDINATOR_RANK:
            raise InvalidConfiguration(
                f"coordinator must own rank {COORDINATOR_RANK}, got rank {channel.rank}"
            )
        super().__init__(channel, malformed_policy)
        self.output_path = Path(output_path) if output_path is not None else None

    def run(
        self,
        record_sources: Sequence[Path | str],
        search_term: str,
        worker_count: Optional[int] = None,
    ) -> RunResult:
        """
        Execute one coordinated search.

        Parameters
        ----------
        record_sources : sequence of paths
            Record sources, loaded and concatenated in list order.
        search_term : str
            Case-sensitive substring matched against primary fields.
        worker_count : int | None
            Expected group size; must match the channel when given.

        Returns
        -------
        RunResult
            Merged matches (coordinator first, then ascending worker rank),
            the coordinator's own timing, and the result artifact path.
        """
        if worker_count is not None and worker_count != self.channel.size:
            raise InvalidConfiguration(
                f"worker count {worker_count} does not match channel group size {self.channel.size}"
            )
        if not record_sources:
            raise InvalidConfiguration("at least one record source is required")

        records = load_records(record_sources, self.malformed_policy)
        shards = partition(len(records), self.channel.size)
        self._distribute(records, shards[1:])

        local = shards[COORDINATOR_RANK]
        matches, timing = self._filter_pass(records[local.as_slice()], search_term)
        matches.extend(self._collect())

        result = RunResult(matches=matches, timings=[timing])
        if self.output_path is not None:
            result.output_path = self._persist(self.output_path, result.text)
        return result

    def _distribute(self, records: List[Record], shards: Sequence[Shard]) -> None:
        for shard in shards:
            payload = encode_records(records[shard.as_slice()])
            self.channel.send(shard.owner, payload)
            log.info(
                f"[DISTRIBUTE] shard -> participant {shard.owner}",
                extra={"worker": shard.owner, "start": shard.start, "end": shard.end, "bytes": len(payload)},
            )

    def _collect(self) -> List[str]:
        collected: List[str] = []
        for rank in range(1, self.channel.size):
            payload = self.channel.recv(rank)
            lines = decode_matches(payload) if payload else []
            collected.extend(lines)
            log.info(f"[COLLECT] participant {rank}", extra={"worker": rank, "matches": len(lines)})
        return collected

    def _persist(self, path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(text)
        log.info("Result artifact written", extra={"path": str(path), "bytes": len(text)})
        return path


__all__ = ["Coordinator"]
