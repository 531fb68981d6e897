"""Command-line interface for jobgraph."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Annotated

import typer

from .clock import ManualClock, SystemClock
from .config import discover_config, set_config_path
from .exceptions import JobGraphError, QueueEmptyError
from .logger import setup_logger
from .parser import SubmissionParser
from .scheduler import JobScheduler

app = typer.Typer(
    name="jobgraph",
    help="Dependency-aware priority scheduling for job graphs",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=state changes, 2=readiness checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: jobgraph_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for jobgraph commands."""
    setup_logger(verbose)
    set_config_path(config)


@app.command()
def run(
    file: Annotated[Path, typer.Argument(help="Path to the submission file (YAML or JSON)")],
    *,
    start_time: Annotated[
        int | None,
        typer.Option(
            "--start-time",
            help="Simulated start time in epoch seconds (default: now)",
        ),
    ] = None,
    realtime: Annotated[
        bool,
        typer.Option(
            "--realtime",
            help="Sleep until delayed jobs are due instead of simulating the clock",
        ),
    ] = False,
) -> None:
    """Drain a submission, printing each job in the order it is handed out."""
    if realtime and start_time is not None:
        typer.echo("Error: Cannot combine --realtime with --start-time", err=True)
        raise typer.Exit(1)

    try:
        spec = SubmissionParser().parse_file(file)
        config = discover_config(file)
    except JobGraphError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    simulated = ManualClock(start_time if start_time is not None else int(time.time()))
    clock = SystemClock() if realtime else simulated
    scheduler = JobScheduler(config, clock)

    try:
        scheduler.submit(spec)
        while True:
            try:
                job_id = scheduler.pop_next()
            except QueueEmptyError:
                break

            if job_id is None:
                due = scheduler.next_due_time()
                if due is None:
                    break
                if realtime:
                    time.sleep(max(0, due - clock.now()))
                else:
                    simulated.set(due)
                continue

            _echo_job(scheduler, job_id)
            scheduler.finish(job_id)
    except JobGraphError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="Path to the submission file (YAML or JSON)")],
) -> None:
    """Check that a submission parses and report how many jobs it holds."""
    try:
        spec = SubmissionParser().parse_file(file)
    except JobGraphError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(f"Valid submission: {spec.count_jobs()} jobs (root: {spec.job_name})")


def _echo_job(scheduler: JobScheduler, job_id: int) -> None:
    typer.echo(f"job_name: {scheduler.job(job_id).name}")
    for argument in scheduler.arguments(job_id):
        typer.echo(f" - {argument}")


def main() -> int:
    """Main entry point."""
    app()
    return 0


if __name__ == "__main__":
    main()
