"""
Ceiling-division partitioning of a record set across participants.

Participant ``i`` owns ``[i * chunk, (i + 1) * chunk)`` clipped to the record
count, with ``chunk = ceil(total / workers)``. The highest ranks may end up
with empty shards when ``total`` does not divide evenly; that is valid.
"""

from __future__ import annotations

from typing import List

from shardsearch.domain.models import Shard
from shardsearch.errors import InvalidConfiguration


def chunk_size(total: int, workers: int) -> int:
    if workers <= 0:
        raise InvalidConfiguration(f"worker count must be >= 1, got {workers}")
    if total < 0:
        raise InvalidConfiguration(f"record count must be >= 0, got {total}")
    return (total + workers - 1) // workers


def partition(total: int, workers: int) -> List[Shard]:
    """
    Compute one contiguous shard per participant.

    Parameters
    ----------
    total : int
        Number of records in the set.
    workers : int
        Number of participants, coordinator included.

    Returns
    -------
    list[Shard]
        ``workers`` shards, indexed by owner rank, whose union is ``[0, total)``.
    """
    chunk = chunk_size(total, workers)
    return [
        Shard(owner=rank, start=min(total, rank * chunk), end=min(total, (rank + 1) * chunk))
        for rank in range(workers)
    ]


__all__ = ["chunk_size", "partition"]
