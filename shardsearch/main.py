from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer

from shardsearch.config import get_settings
from shardsearch.errors import InvalidConfiguration, ShardSearchError
from shardsearch.launcher import run_search
from shardsearch.reporter import print_timings
from shardsearch.utils.logging import configure_logging

app = typer.Typer(help="Parallel coordinator/worker record search.")

USAGE = "Usage: shardsearch run [--workers N] <record_source>... <search_term>"


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"workers={settings.workers} start_method={settings.start_method} "
        f"output={settings.output_path} | max_frame_bytes={settings.max_frame_bytes} "
        f"receive_timeout={settings.receive_timeout_seconds} "
        f"malformed_policy={settings.malformed_policy}"
    )


@app.command()
def run(
    arguments: Optional[List[str]] = typer.Argument(
        None,
        metavar="RECORD_SOURCE... SEARCH_TERM",
        help="Record source files followed by the search term.",
        show_default=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-n",
        help="Participants in the group, coordinator included (default from settings).",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Result artifact path (default from settings).",
    ),
    report: bool = typer.Option(
        False,
        "--report",
        help="Print a per-participant timing table on stderr.",
    ),
) -> None:
    """
    Search every record source for SEARCH_TERM and write the merged matches.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json, participant=0)

    args = list(arguments or [])
    try:
        if len(args) < 2:
            raise InvalidConfiguration("expected at least one record source and a search term")
        *sources, search_term = args
        result = run_search(
            sources,
            search_term,
            worker_count=workers,
            output_path=output,
            settings=settings,
        )
    except InvalidConfiguration as exc:
        typer.echo(f"error: {exc}", err=True)
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1) from exc
    except ShardSearchError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(result.timings[0].line())
    if report:
        print_timings(result.timings)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
