"""
Integration tests for the shardsearch process group.

These tests start real worker processes (spawn start method) connected by
multiprocessing pipes and verify that:
1. Merged output is coordinator-first, then ascending worker rank
2. Empty record sets and empty shards never hang the group
3. Every participant exits cleanly and reports its timing

Run with: pytest tests/integration/
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

from shardsearch.config import Settings
from shardsearch.domain.models import Role
from shardsearch.errors import InvalidConfiguration
from shardsearch.launcher import run_search

DEFAULT_WORKERS = 4
LARGE_CONTACT_COUNT = 5_000
SUBPROCESS_TIMEOUT = 120
REPO_ROOT = Path(__file__).resolve().parents[2]


class TestScenarios:
    """End-to-end scenarios over real processes."""

    def test_scenario_a_matches_in_source_order(self, scenario_a_source: Path, test_settings: Settings):
        result = run_search([scenario_a_source], "Bob", worker_count=2, settings=test_settings)

        assert result.text == "Bob 222\nBobby 333\n"
        assert Path(test_settings.output_path).read_text(encoding="utf-8") == "Bob 222\nBobby 333\n"

    def test_scenario_b_empty_record_set_does_not_hang(self, write_phonebook, test_settings: Settings):
        source = write_phonebook([], name="empty.txt")

        result = run_search([source], "Bob", worker_count=DEFAULT_WORKERS, settings=test_settings)

        assert result.matches == []
        assert Path(test_settings.output_path).read_text(encoding="utf-8") == ""
        assert [t.rank for t in result.timings] == [0, 1, 2, 3]
        assert all(t.records_scanned == 0 for t in result.timings)

    def test_scenario_c_zero_matches_creates_empty_artifact(
        self, scenario_a_source: Path, test_settings: Settings
    ):
        output = Path(test_settings.output_path)
        output.write_text("stale result from a previous run\n", encoding="utf-8")

        result = run_search([scenario_a_source], "Nobody", worker_count=3, settings=test_settings)

        assert result.matches == []
        assert output.read_text(encoding="utf-8") == ""


class TestAggregation:
    """Merged output ordering across many shards and sources."""

    def test_large_record_set_keeps_source_order(self, write_phonebook, test_settings: Settings):
        contacts = [(f"Bob {i:05d}", f"555-{i:05d}") for i in range(LARGE_CONTACT_COUNT)]
        first = write_phonebook(contacts[: LARGE_CONTACT_COUNT // 2], name="phonebook1.txt")
        second = write_phonebook(contacts[LARGE_CONTACT_COUNT // 2 :], name="phonebook2.txt")

        result = run_search(
            [first, second], "Bob", worker_count=DEFAULT_WORKERS, settings=test_settings
        )

        assert result.matches == [f"{name} {phone}\n" for name, phone in contacts]
        assert [t.role for t in result.timings] == [Role.COORDINATOR] + [Role.WORKER] * 3
        assert [t.records_scanned for t in result.timings] == [1250, 1250, 1250, 1250]

    def test_more_workers_than_records(self, scenario_a_source: Path, test_settings: Settings):
        result = run_search([scenario_a_source], "", worker_count=5, settings=test_settings)

        assert result.text == "Alice 111\nBob 222\nBobby 333\n"
        assert [t.records_scanned for t in result.timings] == [1, 1, 1, 0, 0]

    def test_missing_source_fails_before_launch(self, tmp_path: Path, test_settings: Settings):
        with pytest.raises(InvalidConfiguration, match="not found"):
            run_search([tmp_path / "missing.txt"], "Bob", worker_count=2, settings=test_settings)
        assert not Path(test_settings.output_path).exists()


class TestCommandLine:
    """The installed entry point, run as a separate process group."""

    def _run(self, *args: str, cwd: Path) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [sys.executable, "-m", "shardsearch", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=SUBPROCESS_TIMEOUT,
            env={**os.environ, "PYTHONPATH": str(REPO_ROOT)},
        )

    def test_every_participant_reports_and_exits_zero(self, scenario_a_source: Path, tmp_path: Path):
        completed = self._run("run", "--workers", "3", str(scenario_a_source), "Bob", cwd=tmp_path)

        assert completed.returncode == 0, completed.stderr
        for rank, role in [(0, "coordinator"), (1, "worker"), (2, "worker")]:
            assert f"Participant {rank} ({role}) took" in completed.stdout
        assert (tmp_path / "output.txt").read_text(encoding="utf-8") == "Bob 222\nBobby 333\n"

    def test_usage_error_exits_non_zero_without_output(self, scenario_a_source: Path, tmp_path: Path):
        completed = self._run("run", str(scenario_a_source), cwd=tmp_path)

        assert completed.returncode == 1
        assert "Usage: shardsearch run" in completed.stderr
        assert "Participant" not in completed.stdout
        assert not (tmp_path / "output.txt").exists()
