"""Worker role: receive a shard, filter it, send the matches back."""

from __future__ import annotations

from shardsearch.domain.models import COORDINATOR_RANK, ParticipantTiming, Role
from shardsearch.errors import InvalidConfiguration
from shardsearch.protocol.codec import decode_records, encode_matches
from shardsearch.roles.base import Participant
from shardsearch.utils.logging import get_logger

log = get_logger(__name__)


class Worker(Participant):
    role = Role.WORKER

    def serve(self, search_term: str) -> ParticipantTiming:
        """
        Handle exactly one shard from the coordinator.

        Channel failures propagate as ChannelFault; there is no retry and no
        partial result.
        """
        if self.rank == COORDINATOR_RANK:
            raise InvalidConfiguration(f"rank {COORDINATOR_RANK} is reserved for the coordinator")

        payload = self.channel.recv(COORDINATOR_RANK)
        records = decode_records(payload, self.malformed_policy)
        matches, timing = self._filter_pass(records, search_term)
        self.channel.send(COORDINATOR_RANK, encode_matches(matches))
        log.info("[REPLY] matches sent to coordinator", extra={"matches": len(matches)})
        return timing


__all__ = ["Worker"]
