"""Typer CLI entrypoint for the hiring core."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import pendulum
import typer
import yaml
from pydantic import ValidationError

from .container import HiringContainer, create_container
from .errors import HiringError
from .logging import configure_logging
from .schemas import CandidateIdentity
from .schemas.config import load_config
from .service import SnapshotLoader, json_default

app = typer.Typer(help="Candidate evaluation and interview scheduling CLI.")

DataOption = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Snapshot JSON path.")
ConfigOption = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path.")
LogLevelOption = typer.Option("WARNING", help="Log level for structured logging.")


def _build(data: Path, config: Optional[Path], log_level: str, **overrides: Any) -> HiringContainer:
    configure_logging(log_level)

    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(str(exc), param_name="config") from exc

    try:
        snapshot = SnapshotLoader().load(data)
    except (ValueError, ValidationError) as exc:
        raise typer.BadParameter(str(exc), param_name="data") from exc

    return create_container(
        settings=settings,
        applications=snapshot.applications,
        interviews=snapshot.interviews,
        **overrides,
    )


def _echo(payload: Any) -> None:
    typer.echo(json.dumps(payload, default=json_default, ensure_ascii=False, indent=2))


@app.command()
def rank(
    job_id: str = typer.Argument(..., help="Job to rank applications for."),
    data: Path = DataOption,
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
) -> None:
    """Rank analysed applications for a job."""
    service = _build(data, config, log_level).service()
    try:
        entries = service.rank_candidates(job_id)
    except HiringError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    _echo([asdict(entry) for entry in entries])


@app.command()
def duplicates(
    email: str = typer.Option(..., help="Candidate email."),
    name: str = typer.Option(..., help="Candidate full name."),
    phone: Optional[str] = typer.Option(None, help="Candidate phone."),
    job_id: Optional[str] = typer.Option(None, help="Restrict the scan to one job."),
    data: Path = DataOption,
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
) -> None:
    """Check whether a candidate already applied."""
    service = _build(data, config, log_level).service()
    match = service.detect_duplicates(
        CandidateIdentity(email=email, name=name, phone=phone), job_id
    )
    _echo(asdict(match))


@app.command()
def slots(
    interviewer_email: str = typer.Option(..., help="Interviewer email."),
    interviewer_name: str = typer.Option("", help="Interviewer name."),
    duration: int = typer.Option(60, min=1, help="Interview length in minutes."),
    now: Optional[str] = typer.Option(None, help="Reference time (ISO 8601); defaults to now."),
    data: Path = DataOption,
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
) -> None:
    """List free interview windows for an interviewer."""
    overrides: dict[str, Any] = {}
    if now:
        reference = pendulum.parse(now)
        overrides["now_provider"] = lambda: reference
    service = _build(data, config, log_level, **overrides).service()
    windows = service.available_slots(interviewer_email, interviewer_name, duration)
    _echo([asdict(window) for window in windows])


def main() -> None:
    app()


if __name__ == "__main__":
    main()
