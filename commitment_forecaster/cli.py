"""
Commitment Forecaster CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs (invalid input → ``[ERROR]`` on stderr, exit code 1).
  4. Run the engine.
  5. Report result to stdout.

Install and run::

    pip install -e .
    commitment-forecaster --help
    commitment-forecaster validate-config
    commitment-forecaster project --total 1200000 --term 12 --start 2026-01-01 --run-rate 50000
    commitment-forecaster velocity --total 1200000 --term 12 --start 2026-01-01 --run-rate 50000
    commitment-forecaster narrate --total 1200000 --term 12 --start 2026-01-01 --run-rate 50000
"""

from __future__ import annotations

import json
import random
from datetime import date
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="commitment-forecaster",
    help="Spend-commitment consumption forecaster: projections, risk and recommendations.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from commitment_forecaster.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from commitment_forecaster.utils.logging import configure_logging
    configure_logging(config.logging)


def _parse_date_or_exit(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        typer.echo(f"[ERROR] Invalid date for {option}: {exc}", err=True)
        raise typer.Exit(code=1)


def _build_request_or_exit(
    total: float,
    term: int,
    start: str,
    end: Optional[str],
    currency: str,
    run_rate: float,
    growth: float,
    workloads_file: Optional[str],
):
    """Validate CLI inputs into a ``ProjectionRequest``."""
    from pydantic import ValidationError

    from commitment_forecaster.models.commitment import (
        Commitment,
        PlannedWorkload,
        ProjectionRequest,
    )
    from commitment_forecaster.utils.time_utils import add_months

    start_date = _parse_date_or_exit(start, "--start")
    end_date = (
        _parse_date_or_exit(end, "--end") if end else add_months(start_date, max(term, 0))
    )

    workloads: list[PlannedWorkload] = []
    try:
        if workloads_file:
            path = Path(workloads_file)
            raw = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                typer.echo("[ERROR] Workloads file must contain a JSON array.", err=True)
                raise typer.Exit(code=1)
            workloads = [PlannedWorkload(**w) for w in raw]

        return ProjectionRequest(
            commitment=Commitment(
                total_commitment=total,
                term_months=term,
                start_date=start_date,
                end_date=end_date,
                currency=currency.upper(),
            ),
            current_monthly_consumption=run_rate,
            growth_rate_percent=growth,
            planned_workloads=tuple(workloads),
        )
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"[ERROR] Could not read workloads file: {exc}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid input:\n{exc}", err=True)
        raise typer.Exit(code=1)


def _run_projection(config, request, as_of: Optional[str], seed: Optional[int]):
    from commitment_forecaster.engine.orchestrator import generate_projection

    as_of_date = _parse_date_or_exit(as_of, "--as-of") if as_of else None
    rng = random.Random(seed) if seed is not None else None
    return generate_projection(request, as_of=as_of_date, rng=rng, config=config)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  History growth:   {config.history.monthly_growth:.2%}/month")
    typer.echo(f"  History window:   {config.history.max_months} months")
    typer.echo(f"  History noise:    [{config.history.noise_low}, {config.history.noise_high}]")
    typer.echo(f"  History seed:     {config.history.seed}")
    typer.echo(f"  Risk thresholds:  high<{config.risk.high_ratio} medium<{config.risk.medium_ratio}")
    typer.echo(f"  Narrative model:  {config.narrative.deployment} @ {config.narrative.endpoint}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("project")
def project(
    total: float = typer.Option(..., "--total", help="Total commitment amount."),
    term: int = typer.Option(..., "--term", help="Term length in months."),
    start: str = typer.Option(..., "--start", help="Term start date (YYYY-MM-DD)."),
    end: Optional[str] = typer.Option(
        None, "--end", help="Term end date (YYYY-MM-DD). Defaults to start + term."
    ),
    currency: str = typer.Option("USD", "--currency", help="USD, EUR, GBP, JPY or AUD."),
    run_rate: float = typer.Option(..., "--run-rate", help="Current monthly consumption (>= 0)."),
    growth: float = typer.Option(0.0, "--growth", help="Annual growth rate in percent."),
    workloads_file: Optional[str] = typer.Option(
        None, "--workloads", help="JSON file with an array of planned workloads."
    ),
    as_of: Optional[str] = typer.Option(
        None, "--as-of", help="Reference date (YYYY-MM-DD). Defaults to today (UTC)."
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for the synthesized history (overrides config)."
    ),
    out_dir: Optional[str] = typer.Option(
        None, "--out-dir", help="Write trajectory CSV + projection JSON to this directory."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full projection as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Project consumption to term end and print the position and recommendations."""
    from commitment_forecaster.reporting.export import write_projection_reports
    from commitment_forecaster.reporting.formatters import format_projection_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    request = _build_request_or_exit(
        total, term, start, end, currency, run_rate, growth, workloads_file
    )
    projection = _run_projection(config, request, as_of, seed)

    if as_json:
        typer.echo(projection.model_dump_json(indent=2))
    else:
        typer.echo(format_projection_summary(projection))

    if out_dir:
        stem = f"commitment_{request.commitment.start_date.isoformat()}"
        for path in write_projection_reports(projection, Path(out_dir), stem):
            typer.echo(f"  Written: {path}", err=as_json)


@app.command("velocity")
def velocity(
    total: float = typer.Option(..., "--total", help="Total commitment amount."),
    term: int = typer.Option(..., "--term", help="Term length in months."),
    start: str = typer.Option(..., "--start", help="Term start date (YYYY-MM-DD)."),
    end: Optional[str] = typer.Option(None, "--end", help="Term end date (YYYY-MM-DD)."),
    currency: str = typer.Option("USD", "--currency", help="USD, EUR, GBP, JPY or AUD."),
    run_rate: float = typer.Option(..., "--run-rate", help="Current monthly consumption (>= 0)."),
    growth: float = typer.Option(0.0, "--growth", help="Annual growth rate in percent."),
    workloads_file: Optional[str] = typer.Option(
        None, "--workloads", help="JSON file with an array of planned workloads."
    ),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference date (YYYY-MM-DD)."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the synthesized history."),
    as_json: bool = typer.Option(False, "--json", help="Print metrics as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Compare the current run rate with the velocity needed to meet the commitment."""
    from commitment_forecaster.engine.velocity import analyze_velocity
    from commitment_forecaster.reporting.formatters import format_velocity

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    request = _build_request_or_exit(
        total, term, start, end, currency, run_rate, growth, workloads_file
    )
    projection = _run_projection(config, request, as_of, seed)
    metrics = analyze_velocity(projection)

    if as_json:
        typer.echo(metrics.model_dump_json(indent=2))
    else:
        typer.echo(format_velocity(metrics, request.commitment.currency))


@app.command("narrate")
def narrate(
    total: float = typer.Option(..., "--total", help="Total commitment amount."),
    term: int = typer.Option(..., "--term", help="Term length in months."),
    start: str = typer.Option(..., "--start", help="Term start date (YYYY-MM-DD)."),
    end: Optional[str] = typer.Option(None, "--end", help="Term end date (YYYY-MM-DD)."),
    currency: str = typer.Option("USD", "--currency", help="USD, EUR, GBP, JPY or AUD."),
    run_rate: float = typer.Option(..., "--run-rate", help="Current monthly consumption (>= 0)."),
    growth: float = typer.Option(0.0, "--growth", help="Annual growth rate in percent."),
    workloads_file: Optional[str] = typer.Option(
        None, "--workloads", help="JSON file with an array of planned workloads."
    ),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference date (YYYY-MM-DD)."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the synthesized history."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Ask the text-completion service for an executive summary of the projection."""
    from commitment_forecaster.credentials.cache import (
        CredentialCache,
        EnvSecretFetcher,
        SecretNotFoundError,
    )
    from commitment_forecaster.narrative.client import NarrativeClient, NarrativeServiceError

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    request = _build_request_or_exit(
        total, term, start, end, currency, run_rate, growth, workloads_file
    )
    projection = _run_projection(config, request, as_of, seed)

    fetcher = EnvSecretFetcher()
    cache = CredentialCache(fetcher, ttl_seconds=config.secrets.ttl_seconds)
    try:
        with NarrativeClient(config.narrative, cache) as client:
            text = client.narrate_summary(projection)
    except SecretNotFoundError:
        typer.echo(
            f"[ERROR] No API key: set {fetcher.env_var(config.narrative.secret_name)} "
            "in the environment or .env.",
            err=True,
        )
        raise typer.Exit(code=1)
    except NarrativeServiceError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(text or "[WARN] The completion service returned no text.")


if __name__ == "__main__":
    app()
