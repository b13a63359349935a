from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from shardsearch.domain.models import ParticipantTiming


def build_timing_table(timings: Sequence[ParticipantTiming]) -> Table:
    """
    Render per-participant filter timings as a rich table, ordered by rank.
    """
    table = Table(
        title="shardsearch participant timings",
        box=box.ROUNDED,
        caption="Coordinator first, then workers by rank",
    )
    table.add_column("Rank", justify="right", style="cyan", no_wrap=True)
    table.add_column("Role", style="blue")
    table.add_column("Records", justify="right", style="magenta")
    table.add_column("Matches", justify="right", style="bold green")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")

    for timing in sorted(timings, key=lambda t: t.rank):
        mem_str = "N/A"
        if timing.peak_rss_bytes:
            mem_str = f"{timing.peak_rss_bytes / (1024 * 1024):.2f}"
        cpu_str = "N/A" if timing.cpu_percent is None else f"{timing.cpu_percent:.1f}"

        table.add_row(
            str(timing.rank),
            timing.role.value,
            f"{timing.records_scanned:,}",
            f"{timing.matches:,}",
            f"{timing.duration_seconds:.6f}",
            mem_str,
            cpu_str,
        )
    return table


def print_timings(timings: Sequence[ParticipantTiming], console: Optional[Console] = None) -> None:
    console = console or Console(stderr=True)
    if not timings:
        console.print("[yellow]No timings to display.[/yellow]")
        return
    console.print(build_timing_table(timings))
