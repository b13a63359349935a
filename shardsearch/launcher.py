"""
Launcher for a shardsearch process group.

Starts one worker process per non-zero rank, wires each to the coordinator
with a duplex pipe, runs the coordinator in the calling process, and gathers
every participant's timing.

Usage (example from CLI):
    from shardsearch.launcher import run_search

    result = run_search(["phonebook1.txt", "phonebook2.txt"], "Bob", worker_count=4)
    print(result.text)
"""

from __future__ import annotations

import multiprocessing as mp
import queue
import sys
from multiprocessing.connection import Connection
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from shardsearch.channel.pipe import PipeChannel
from shardsearch.config import Settings, get_settings
from shardsearch.domain.models import COORDINATOR_RANK, ParticipantTiming, Role, RunResult
from shardsearch.errors import InvalidConfiguration, ShardSearchError
from shardsearch.protocol.codec import ensure_policy
from shardsearch.roles.coordinator import Coordinator
from shardsearch.roles.worker import Worker
from shardsearch.utils.logging import configure_logging, get_logger

log = get_logger(__name__)


def _participant_main(
    rank: int,
    size: int,
    conn: Connection,
    search_term: str,
    settings: Settings,
    timings: "mp.Queue[ParticipantTiming]",
) -> None:
    """
    Entry point of a worker process. Must stay importable at module level for `spawn`.
    """
    configure_logging(level=settings.log_level, json_logs=settings.log_json, participant=rank)
    role = Role.for_rank(rank)
    if role is not Role.WORKER:
        raise InvalidConfiguration(f"rank {rank} cannot be launched as a worker process")

    channel = PipeChannel(
        rank=rank,
        size=size,
        peers={COORDINATOR_RANK: conn},
        max_frame_bytes=settings.max_frame_bytes,
        receive_timeout=settings.receive_timeout_seconds,
    )
    try:
        with channel:
            timing = Worker(channel, settings.malformed_policy).serve(search_term)
    except ShardSearchError as exc:
        log.error(f"[PARTICIPANT FAILED] {exc}", extra={"error_type": type(exc).__name__})
        sys.exit(1)

    timings.put(timing)
    print(timing.line(), flush=True)


def _validate(record_sources: Sequence[Path | str], workers: int) -> None:
    if not record_sources:
        raise InvalidConfiguration("at least one record source is required")
    if workers <= 0:
        raise InvalidConfiguration(f"worker count must be >= 1, got {workers}")
    for source in record_sources:
        if not Path(source).is_file():
            raise InvalidConfiguration(f"record source not found: {source}")


def _gather_timings(
    timings: "mp.Queue[ParticipantTiming]", expected: int, timeout: float
) -> List[ParticipantTiming]:
    gathered: List[ParticipantTiming] = []
    for _ in range(expected):
        try:
            gathered.append(timings.get(timeout=timeout))
        except queue.Empty:
            log.warning(
                "Worker timings incomplete",
                extra={"expected": expected, "received": len(gathered)},
            )
            break
    return sorted(gathered, key=lambda timing: timing.rank)


def _shutdown(processes: List[mp.process.BaseProcess], timeout: float, terminate: bool) -> None:
    for process in processes:
        if terminate and process.is_alive():
            log.warning(f"[TERMINATE] {process.name}")
            process.terminate()
    for process in processes:
        process.join(timeout=timeout)
        if process.exitcode not in (0, None):
            log.warning(f"{process.name} exited with status {process.exitcode}")


def run_search(
    record_sources: Sequence[Path | str],
    search_term: str,
    worker_count: Optional[int] = None,
    output_path: Optional[Path | str] = None,
    settings: Optional[Settings] = None,
) -> RunResult:
    """
    Run one coordinated search across `worker_count` participants.

    Parameters
    ----------
    record_sources : sequence of paths
        Record source files, concatenated in list order.
    search_term : str
        Case-sensitive substring matched against primary fields.
    worker_count : int | None
        Participants in the group, coordinator included. Defaults to settings.workers.
    output_path : Path | str | None
        Result artifact. Defaults to settings.output_path.
    settings : Settings | None
        Overrides the cached environment settings.

    Returns
    -------
    RunResult
        Merged matches plus every participant's timing, ordered by rank.
    """
    settings = settings or get_settings()
    workers = settings.workers if worker_count is None else worker_count
    sources = list(record_sources)
    _validate(sources, workers)
    policy = ensure_policy(settings.malformed_policy)
    output = Path(output_path) if output_path is not None else Path(settings.output_path)

    # Local context: never touch the global start method.
    try:
        ctx = mp.get_context(settings.start_method)
    except ValueError as exc:
        raise InvalidConfiguration(f"unknown start method {settings.start_method!r}") from exc
    timings: "mp.Queue[ParticipantTiming]" = ctx.Queue()
    pipes: Dict[int, tuple[Connection, Connection]] = {
        rank: ctx.Pipe(duplex=True) for rank in range(1, workers)
    }
    channel = PipeChannel(
        rank=COORDINATOR_RANK,
        size=workers,
        peers={rank: parent_end for rank, (parent_end, _) in pipes.items()},
        max_frame_bytes=settings.max_frame_bytes,
        receive_timeout=settings.receive_timeout_seconds,
    )

    log.info(
        f"[LAUNCH] {workers} participant(s)",
        extra={"workers": workers, "sources": len(sources), "start_method": settings.start_method},
    )
    processes: List[mp.process.BaseProcess] = []
    failed = True
    try:
        for rank, (_, child_end) in pipes.items():
            process = ctx.Process(
                target=_participant_main,
                args=(rank, workers, child_end, search_term, settings, timings),
                name=f"shardsearch-worker-{rank}",
                daemon=True,
            )
            process.start()
            # Only the child keeps this end open, so its exit shows up as EOF here.
            child_end.close()
            processes.append(process)

        coordinator = Coordinator(channel, output_path=output, malformed_policy=policy)
        result = coordinator.run(sources, search_term, worker_count=workers)
        result.timings.extend(
            _gather_timings(timings, len(processes), settings.join_timeout_seconds)
        )
        failed = False
    finally:
        channel.close()
        for _, child_end in pipes.values():
            child_end.close()
        _shutdown(processes, settings.join_timeout_seconds, terminate=failed)

    log.info(
        "[RUN COMPLETE]",
        extra={"matches": len(result.matches), "output": str(result.output_path)},
    )
    return result


__all__ = ["run_search"]
