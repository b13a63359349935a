"""
Pytest configuration for shardsearch.

Provides fixtures for:
- Settings overrides that keep artifacts inside tmp_path
- Writing phonebook sources in the legacy quoted shape
- Running a whole participant group over the in-memory channel
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, List, Sequence

import pytest

from shardsearch.channel.memory import InMemoryNetwork
from shardsearch.config import Settings
from shardsearch.domain.models import ParticipantTiming, RunResult
from shardsearch.roles.coordinator import Coordinator
from shardsearch.roles.worker import Worker

SCENARIO_A_CONTACTS = [("Alice", "111"), ("Bob", "222"), ("Bobby", "333")]

# Generous bound so a protocol bug fails the test instead of hanging it.
RECEIVE_TIMEOUT = 10.0


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.
    """
    return Settings(
        workers=2,
        output_path=str(tmp_path / "output.txt"),
        log_level="DEBUG",
        receive_timeout_seconds=RECEIVE_TIMEOUT,
        join_timeout_seconds=RECEIVE_TIMEOUT,
    )


@pytest.fixture
def write_phonebook(tmp_path: Path) -> Callable[..., Path]:
    """
    Write `(name, phone)` pairs as ``"name","phone"`` lines and return the path.
    """

    def _write(contacts: Sequence[tuple[str, str]], name: str = "phonebook.txt") -> Path:
        path = tmp_path / name
        lines = [f'"{primary}","{secondary}"\n' for primary, secondary in contacts]
        path.write_text("".join(lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def scenario_a_source(write_phonebook: Callable[..., Path]) -> Path:
    return write_phonebook(SCENARIO_A_CONTACTS)


def run_in_memory_group(
    sources: Sequence[Path],
    term: str,
    workers: int,
    output_path: Path | None = None,
) -> tuple[RunResult, List[ParticipantTiming]]:
    """
    Run a coordinator in the calling thread and each worker in its own thread.
    """
    network = InMemoryNetwork(workers, receive_timeout=RECEIVE_TIMEOUT)
    worker_timings: List[ParticipantTiming] = []
    errors: List[BaseException] = []
    lock = threading.Lock()

    def _serve(rank: int) -> None:
        try:
            timing = Worker(network.channel(rank)).serve(term)
        except BaseException as exc:  # noqa: BLE001 - surfaced to the test below
            with lock:
                errors.append(exc)
            return
        with lock:
            worker_timings.append(timing)

    threads = [
        threading.Thread(target=_serve, args=(rank,), name=f"worker-{rank}", daemon=True)
        for rank in range(1, workers)
    ]
    for thread in threads:
        thread.start()

    result = Coordinator(network.channel(0), output_path=output_path).run(sources, term)

    for thread in threads:
        thread.join(timeout=RECEIVE_TIMEOUT)
    if errors:
        raise errors[0]
    return result, sorted(worker_timings, key=lambda timing: timing.rank)


@pytest.fixture
def in_memory_group() -> Callable[..., tuple[RunResult, List[ParticipantTiming]]]:
    return run_in_memory_group
