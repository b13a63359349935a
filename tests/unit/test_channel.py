from __future__ import annotations

import multiprocessing as mp
import threading

import pytest

from shardsearch.channel import InMemoryNetwork, MessageChannel, PipeChannel
from shardsearch.errors import ChannelFault, FrameError
from shardsearch.protocol.framing import encode_frame

SHORT_TIMEOUT = 0.05


def test_in_memory_channel_satisfies_protocol():
    network = InMemoryNetwork(2)
    assert isinstance(network.channel(0), MessageChannel)


def test_in_memory_delivery_preserves_per_pair_send_order():
    network = InMemoryNetwork(3)
    coordinator, worker = network.channel(0), network.channel(2)

    for payload in (b"first", b"second", b"third"):
        coordinator.send(2, payload)

    assert [worker.recv(0) for _ in range(3)] == [b"first", b"second", b"third"]


def test_in_memory_links_are_independent_per_sender():
    network = InMemoryNetwork(3)
    network.channel(2).send(0, b"from two")
    network.channel(1).send(0, b"from one")

    coordinator = network.channel(0)
    assert coordinator.recv(1) == b"from one"
    assert coordinator.recv(2) == b"from two"


def test_in_memory_channel_frames_payloads():
    network = InMemoryNetwork(2)
    network.channel(0).send(1, b"")
    assert network.pending(0, 1) == 1
    assert network.link(0, 1).get_nowait() == encode_frame(b"")


def test_in_memory_receive_timeout_is_a_channel_fault():
    network = InMemoryNetwork(2, receive_timeout=SHORT_TIMEOUT)
    with pytest.raises(ChannelFault, match="timed out"):
        network.channel(1).recv(0)


def test_oversized_frame_is_rejected_by_receiver():
    network = InMemoryNetwork(2, max_frame_bytes=8)
    network.inject(0, 1, encode_frame(b"x" * 32))
    with pytest.raises(FrameError, match="exceeds maximum"):
        network.channel(1).recv(0)


@pytest.mark.parametrize("peer", [-1, 0, 3])
def test_addressing_self_or_unknown_participant_is_a_channel_fault(peer: int):
    channel = InMemoryNetwork(3).channel(0)
    with pytest.raises(ChannelFault, match="cannot address"):
        channel.send(peer, b"payload")


def test_pipe_channel_round_trip_between_two_endpoints():
    coordinator_end, worker_end = mp.Pipe(duplex=True)
    coordinator = PipeChannel(rank=0, size=2, peers={1: coordinator_end})
    worker = PipeChannel(rank=1, size=2, peers={0: worker_end})

    with coordinator, worker:
        coordinator.send(1, b"Alice,111\n")
        assert worker.recv(0) == b"Alice,111\n"
        worker.send(0, b"")
        assert coordinator.recv(1) == b""


def test_pipe_channel_large_payload_crosses_in_one_frame():
    coordinator_end, worker_end = mp.Pipe(duplex=True)
    coordinator = PipeChannel(rank=0, size=2, peers={1: coordinator_end})
    worker = PipeChannel(rank=1, size=2, peers={0: worker_end})
    payload = b"Bob,222\n" * 200_000

    # Pipe buffers are finite, so the receiver must drain concurrently.
    sender = threading.Thread(target=coordinator.send, args=(1, payload))
    sender.start()
    try:
        assert worker.recv(0) == payload
    finally:
        sender.join(timeout=5)
        coordinator.close()
        worker.close()


def test_pipe_channel_closed_peer_is_a_channel_fault():
    coordinator_end, worker_end = mp.Pipe(duplex=True)
    worker = PipeChannel(rank=1, size=2, peers={0: worker_end})
    coordinator_end.close()

    with pytest.raises(ChannelFault, match="closed the channel"):
        worker.recv(0)
    worker.close()


def test_pipe_channel_receive_timeout_is_a_channel_fault():
    coordinator_end, worker_end = mp.Pipe(duplex=True)
    worker = PipeChannel(rank=1, size=2, peers={0: worker_end}, receive_timeout=SHORT_TIMEOUT)
    try:
        with pytest.raises(ChannelFault, match="timed out"):
            worker.recv(0)
    finally:
        worker.close()
        coordinator_end.close()


def test_pipe_channel_refuses_messages_above_frame_limit():
    coordinator_end, worker_end = mp.Pipe(duplex=True)
    worker = PipeChannel(rank=1, size=2, peers={0: worker_end}, max_frame_bytes=16)
    coordinator_end.send_bytes(encode_frame(b"x" * 64))
    try:
        with pytest.raises(ChannelFault):
            worker.recv(0)
    finally:
        worker.close()
        coordinator_end.close()


def test_pipe_channel_without_route_is_a_channel_fault():
    channel = PipeChannel(rank=0, size=3, peers={})
    with pytest.raises(ChannelFault, match="no route"):
        channel.send(2, b"payload")
