"""Main CLI Module - Command-line driver for the sanitizers."""

import json
import logging
import sys
from typing import Dict, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..cache.snapshot import ClusterSnapshot
from ..core.collector import Collector, Outcome
from ..core.config import SanitizeOptions, SanitizerConfig, load_config
from ..core.exceptions import HygieneError
from ..core.issues import ROOT, Level
from ..core.parallel_executor import ParallelExecutor
from ..core.tally import Tally
from ..sanitizers.deployment import DeploymentSanitizer
from ..sanitizers.pod import PodSanitizer

console = Console()

SANITIZERS = {
    "deployment": DeploymentSanitizer,
    "pod": PodSanitizer,
}


def get_score_color(score: float) -> str:
    """Get color for score value."""
    if score >= 80:
        return "green"
    elif score >= 70:
        return "yellow"
    elif score >= 60:
        return "orange1"
    else:
        return "red"


@click.group()
@click.version_option(version="1.0.0", prog_name="kubehygiene")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Kube Hygiene - Find misconfigured and mis-sized workloads."""
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@cli.command("sanitize")
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file with allocation and pod thresholds")
@click.option("--kind", "-k", "kinds", multiple=True, type=click.Choice(list(SANITIZERS)),
              default=tuple(SANITIZERS), help="Resource kinds to sanitize (default: all)")
@click.option("--over-allocs", is_flag=True,
              help="Include over/under allocation analysis (needs pod metrics)")
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "json"]),
              default="table", help="Output format")
def sanitize(
    snapshot: str,
    config_path: Optional[str],
    kinds: tuple,
    over_allocs: bool,
    output_format: str,
):
    """Sanitize the workloads found in a cluster snapshot.

    SNAPSHOT is a YAML or JSON dump of deployments, pods and pod metrics.
    """
    try:
        config = load_config(config_path) if config_path else SanitizerConfig()
        cluster = ClusterSnapshot.from_file(snapshot, config=config)
    except HygieneError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(2)

    # One collector per kind, resources of different kinds may share a name.
    collectors = {kind: Collector() for kind in kinds}
    executor = ParallelExecutor()
    for kind in kinds:
        executor.add_sanitizer(SANITIZERS[kind](collectors[kind], cluster))

    result = executor.run(SanitizeOptions(over_allocs=over_allocs))
    outcomes = {kind: collectors[kind].outcome() for kind in kinds}

    if output_format == "json":
        click.echo(json.dumps(
            {
                "sanitizers": {
                    kind: {
                        "tally": Tally.from_outcome(kind, outcome).to_dict(),
                        "issues": outcome.to_dict(),
                    }
                    for kind, outcome in outcomes.items()
                },
                "errors": result.errors,
            },
            indent=2,
        ))
    else:
        _display_outcomes(outcomes)
        for kind, error in result.errors.items():
            console.print(f"[red]Sanitizer {kind} failed: {error}[/red]")

    if result.errors:
        sys.exit(2)
    if any(outcome.counts()[Level.ERROR] for outcome in outcomes.values()):
        sys.exit(1)


@cli.command("config")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file with allocation and pod thresholds")
def config(config_path: Optional[str]):
    """Show the effective sanitizer thresholds."""
    try:
        cfg = load_config(config_path) if config_path else SanitizerConfig()
    except HygieneError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(2)

    table = Table(title="Sanitizer Thresholds")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("CPU under allocation (%)", f"{cfg.cpu.under_perc:g}")
    table.add_row("CPU over allocation (%)", f"{cfg.cpu.over_perc:g}")
    table.add_row("Memory under allocation (%)", f"{cfg.memory.under_perc:g}")
    table.add_row("Memory over allocation (%)", f"{cfg.memory.over_perc:g}")
    table.add_row("Container restarts", str(cfg.pod.restarts))
    table.add_row("Pod CPU of limit (%)", f"{cfg.pod.cpu_perc:g}")
    table.add_row("Pod memory of limit (%)", f"{cfg.pod.mem_perc:g}")

    console.print(table)


def _display_outcomes(outcomes: Dict[str, Outcome]):
    """Display sanitizer outcomes in the terminal."""
    for kind, outcome in outcomes.items():
        tally = Tally.from_outcome(kind, outcome)
        score_color = get_score_color(tally.score)

        console.print(Panel.fit(
            f"[bold {score_color}]{tally.score}[/bold {score_color}] / 100  "
            f"Grade: [bold]{tally.grade}[/bold]  "
            f"Resources: {tally.total}",
            title=f"{kind.title()}s",
            border_style=score_color,
        ))

        if outcome.issue_count == 0:
            console.print("  [green]No issues found[/green]\n")
            continue

        table = Table()
        table.add_column("Resource", style="cyan")
        table.add_column("Container")
        table.add_column("Level")
        table.add_column("Message")

        for fqn in sorted(outcome):
            for issue in outcome[fqn]:
                color = issue.level.color
                table.add_row(
                    fqn,
                    "" if issue.group == ROOT else issue.group,
                    f"[{color}]{issue.level.value.upper()}[/{color}]",
                    issue.message,
                )

        console.print(table)
        console.print()


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
