"""StoryCompass CLI - typer application entry point."""

from __future__ import annotations

import asyncio
import atexit
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from storycompass.config import ConfigError, EngineConfig, load_engine_config
from storycompass.errors import (
    BundleNotFoundError,
    ContentLoadError,
    ScenarioGraphError,
    ScoringInputError,
)
from storycompass.graph.validation import run_scenario_checks
from storycompass.observability import close_file_logging, configure_logging, get_logger
from storycompass.scoring.badges import BadgeScoreCalculator
from storycompass.storage.yaml_repo import (
    YAML_SUFFIXES,
    YamlContentRepository,
    load_scenario_file,
)

if TYPE_CHECKING:
    from storycompass.graph.validation import ValidationReport
    from storycompass.models import AxisScoreResult, Scenario

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="storycompass",
    help="StoryCompass: scene-graph validation and compass score distributions.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

DEFAULT_LOG_FILE = Path("logs") / "debug.jsonl"

# Exit codes
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2

# Global state set by the callback
_config_path: Path | None = None


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_to_file: Annotated[
        bool,
        typer.Option("--log", help="Enable file logging to ./logs/debug.jsonl."),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file or directory containing storycompass.yaml.",
            envvar="STORYCOMPASS_CONFIG",
        ),
    ] = None,
) -> None:
    """StoryCompass: scene-graph validation and compass score distributions."""
    global _config_path
    _config_path = config

    configure_logging(verbosity=verbose, log_file=DEFAULT_LOG_FILE if log_to_file else None)
    if log_to_file:
        atexit.register(close_file_logging)


def _load_config() -> EngineConfig:
    try:
        return load_engine_config(_config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_BAD_INPUT) from e


def _collect_scenarios(path: Path) -> list[Scenario]:
    """Load scenarios from a file, a content directory or a directory of files."""
    if path.is_file():
        return [load_scenario_file(path)]
    if (path / "scenarios").is_dir():
        return YamlContentRepository(path).list_scenarios()
    if path.is_dir():
        files = sorted(p for p in path.iterdir() if p.suffix in YAML_SUFFIXES and p.is_file())
        return [load_scenario_file(p) for p in files]
    raise ContentLoadError(path, "No such file or directory")


def _print_report(scenario: Scenario, report: ValidationReport) -> None:
    start = scenario.start_scene
    axes = ", ".join(scenario.declared_axes()) or "none"
    table = Table(
        title=f"{escape(scenario.title or scenario.id)} ({report.summary})",
        caption=escape(f"Start: {start.display_name if start else 'missing'} | Axes: {axes}"),
    )
    table.add_column("Check", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Message")

    status_icons = {
        "pass": "[green]✓[/green] pass",
        "warn": "[yellow]![/yellow] warn",
        "fail": "[red]✗[/red] fail",
    }
    for check in report.checks:
        table.add_row(check.name, status_icons[check.severity], escape(check.message))

    console.print(table)
    for detail in report.errors:
        console.print(f"  [red]-[/red] {escape(detail)}")


@app.command()
def version() -> None:
    """Show version information."""
    from storycompass import __version__

    console.print(f"StoryCompass v{__version__}")


@app.command()
def validate(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Scenario files, content directories or directories of scenarios."),
    ],
) -> None:
    """Validate the scene graphs of one or more scenarios."""
    scenarios: list[Scenario] = []
    try:
        for path in paths:
            scenarios.extend(_collect_scenarios(path))
    except ContentLoadError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_BAD_INPUT) from e

    if not scenarios:
        console.print("[yellow]No scenarios found.[/yellow]")
        return

    failed = 0
    for scenario in scenarios:
        report = run_scenario_checks(scenario)
        _print_report(scenario, report)
        if report.has_failures:
            failed += 1

    console.print()
    if failed:
        console.print(f"[red]{failed} of {len(scenarios)} scenario(s) failed validation.[/red]")
        raise typer.Exit(EXIT_FAILED)
    console.print(f"[green]All {len(scenarios)} scenario(s) valid.[/green]")


def _print_scores(bundle_id: str, results: list[AxisScoreResult]) -> None:
    if not results:
        console.print(f"[yellow]No compass scores found for bundle {bundle_id}.[/yellow]")
        return

    percentiles = list(results[0].percentile_scores)
    table = Table(title=f"Badge scores: {bundle_id}")
    table.add_column("Axis", style="cyan")
    table.add_column("Paths", justify="right", style="dim")
    for p in percentiles:
        table.add_column(f"p{p:g}", justify="right")

    for result in results:
        table.add_row(
            result.axis_name,
            str(result.path_count),
            *(f"{result.percentile_scores[p]:.2f}" for p in percentiles),
        )
    console.print(table)


@app.command()
def scores(
    bundle_id: Annotated[str, typer.Argument(help="Content bundle to score.")],
    percentile: Annotated[
        list[float] | None,
        typer.Option(
            "--percentile",
            "-p",
            help="Percentile to compute (repeatable). Defaults to the configured list.",
        ),
    ] = None,
    content_dir: Annotated[
        Path | None,
        typer.Option("--content-dir", "-d", help="Content directory (overrides config)."),
    ] = None,
) -> None:
    """Compute per-axis percentile scores for a content bundle."""
    config = _load_config()
    if content_dir is not None:
        config.content_dir = content_dir

    log.debug("scores_requested", bundle_id=bundle_id, content_dir=str(config.content_dir))
    calculator = BadgeScoreCalculator(YamlContentRepository(config.content_dir), config)
    try:
        results = asyncio.run(calculator.calculate(bundle_id, percentile or None))
    except ScoringInputError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_BAD_INPUT) from e
    except (BundleNotFoundError, ContentLoadError, ScenarioGraphError, TimeoutError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILED) from e

    _print_scores(bundle_id, results)
