"""
Multiprocessing pipe channel.

The launcher creates one duplex pipe between the coordinator and each worker;
each participant process wraps its pipe ends in a PipeChannel keyed by the
peer's rank. A peer process that exits closes its end, which surfaces here as
a ChannelFault on the next receive.
"""

from __future__ import annotations

from multiprocessing.connection import Connection
from typing import Dict, Mapping, Optional

from shardsearch.channel.base import DEFAULT_MAX_FRAME_BYTES, AbstractChannel
from shardsearch.errors import ChannelFault
from shardsearch.protocol.framing import HEADER


class PipeChannel(AbstractChannel):
    def __init__(
        self,
        rank: int,
        size: int,
        peers: Mapping[int, Connection],
        max_frame_bytes: int = DEFAULT_MAX_FRAME_BYTES,
        receive_timeout: Optional[float] = None,
    ) -> None:
        super().__init__(
            rank=rank,
            size=size,
            max_frame_bytes=max_frame_bytes,
            receive_timeout=receive_timeout,
        )
        self._peers: Dict[int, Connection] = dict(peers)

    def _connection(self, peer: int) -> Connection:
        try:
            return self._peers[peer]
        except KeyError:
            raise ChannelFault(f"participant {self.rank} has no route to participant {peer}") from None

    def _send_frame(self, dest: int, frame: bytes) -> None:
        try:
            self._connection(dest).send_bytes(frame)
        except (OSError, ValueError) as exc:
            raise ChannelFault(f"send to participant {dest} failed: {exc}") from exc

    def _recv_frame(self, source: int) -> bytes:
        conn = self._connection(source)
        try:
            if self.receive_timeout is not None and not conn.poll(self.receive_timeout):
                raise ChannelFault(
                    f"participant {self.rank} timed out after {self.receive_timeout}s "
                    f"waiting for participant {source}"
                )
            # maxlength makes the pipe refuse oversized messages before buffering them.
            return conn.recv_bytes(maxlength=self.max_frame_bytes + HEADER.size)
        except EOFError as exc:
            raise ChannelFault(f"participant {source} closed the channel") from exc
        except OSError as exc:
            raise ChannelFault(f"receive from participant {source} failed: {exc}") from exc

    def close(self) -> None:
        for conn in self._peers.values():
            conn.close()
        self._peers.clear()


__all__ = ["PipeChannel"]
