"""
Phonebook generator for shardsearch.

Writes deterministic pseudo-random contacts in the legacy quoted shape
(``"Name","Phone"``), optionally split over several files, for manual runs
and benchmarking of the process group.
"""

from __future__ import annotations

import csv
import random
import sys
import time
from pathlib import Path
from typing import List

import typer

app = typer.Typer(help="Generate synthetic phonebook files for shardsearch.")

FIRST_NAMES = [
    "Alice", "Bob", "Bobby", "Carol", "Dave", "Eve", "Frank", "Grace",
    "Heidi", "Ivan", "Judy", "Mallory", "Niaj", "Olivia", "Peggy", "Rupert",
    "Sybil", "Trent", "Victor", "Walter",
]
LAST_NAMES = [
    "Anderson", "Brown", "Clark", "Davis", "Evans", "Garcia", "Harris",
    "Jackson", "Lopez", "Martin", "Nguyen", "Smith", "Taylor", "Walker",
]


def _generate_contacts_csv(csv_path: Path, rows: int, batch_size: int, seed: int) -> None:
    rng = random.Random(seed)

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")

        buffer: List[List[str]] = []
        for _ in range(rows):
            name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
            phone = f"{rng.randint(200, 999)}-{rng.randint(200, 999)}-{rng.randint(0, 9999):04d}"
            buffer.append([name, phone])
            if len(buffer) >= batch_size:
                writer.writerows(buffer)
                buffer.clear()
        if buffer:
            writer.writerows(buffer)


@app.command()
def main(
    rows: int = typer.Option(
        100_000,
        "--rows",
        "-r",
        help="Number of contacts per file.",
    ),
    files: int = typer.Option(
        1,
        "--files",
        "-f",
        help="Number of phonebook files to write.",
    ),
    batch_size: int = typer.Option(
        10_000,
        "--batch-size",
        "-b",
        help="Batch size for CSV buffering during generation.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed (file i uses seed + i).",
    ),
    output_dir: Path = typer.Option(
        Path("data"),
        "--output-dir",
        "-o",
        help="Directory receiving phonebook<N>.txt files.",
    ),
) -> None:
    """
    Generate synthetic phonebook files.
    """
    start = time.perf_counter()
    output_dir.mkdir(parents=True, exist_ok=True)

    for index in range(1, files + 1):
        csv_path = output_dir / f"phonebook{index}.txt"
        typer.echo(f"Generating {rows:,} contacts -> {csv_path} (seed={seed + index - 1})")
        _generate_contacts_csv(csv_path, rows=rows, batch_size=batch_size, seed=seed + index - 1)

    duration = time.perf_counter() - start
    total = rows * files
    typer.echo(
        f"Generation completed in {duration:.2f}s ({total / duration:,.0f} contacts/s)"
        if duration > 0
        else "Generation completed."
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
