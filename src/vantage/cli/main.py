"""Vantage CLI - score assessments, inspect gaps and roadmaps from a YAML workspace."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..core.config import get_effective_config
from ..core.service import AssessmentService
from ..core.weights import normalize_template
from ..errors import ConfigurationError, NotFoundError
from ..formatters.markdown import generate_assessment_report
from ..models.template import Template
from ..store.loader import load_template_file
from ..store.memory import InMemoryStore

console = Console()

EXIT_NOT_FOUND = 1
EXIT_CONFIGURATION = 3
EXIT_NOT_ENTITLED = 4


@contextmanager
def _cli_errors(ctx: click.Context) -> Iterator[None]:
    """Map engine errors to exit codes."""
    try:
        yield
    except NotFoundError as e:
        console.print(f"  [red]ERROR[/red] {escape(str(e))}")
        ctx.exit(EXIT_NOT_FOUND)
    except (ConfigurationError, ValueError) as e:
        console.print(f"  [red]ERROR[/red] {escape(str(e))}")
        ctx.exit(EXIT_CONFIGURATION)


def _echo_json(payload: object) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _service(ctx: click.Context, data: str) -> AssessmentService:
    store = InMemoryStore.from_yaml(Path(data))
    return AssessmentService.from_config(store, ctx.obj["config"])


data_option = click.option(
    "--data", "-d", type=click.Path(exists=True, dir_okay=False), required=True,
    help="Workspace YAML with templates, assessments, subscriptions and vendors",
)
org_option = click.option("--org", "-o", "organization_id", required=True, help="Organization ID of the caller")


@click.group()
@click.version_option(__version__, prog_name="vantage")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML config file")
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "json"]), help="Output format")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, output_format: str | None, verbose: bool) -> None:
    """Vantage - evidence-weighted compliance scoring."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    overrides = {"output": {"format": output_format}} if output_format else None
    with _cli_errors(ctx):
        config = get_effective_config(Path(config_path) if config_path else None, cli_overrides=overrides)
        ctx.obj = {"config": config, "format": config["output"]["format"]}


@cli.command()
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx: click.Context, template_file: str) -> None:
    """Validate a template and show its normalized weights."""
    with _cli_errors(ctx):
        template = Template.model_validate(load_template_file(Path(template_file)))
        normalized = normalize_template(template)

    if ctx.obj["format"] == "json":
        _echo_json(normalized.to_wire())
        return

    table = Table(title=f"{normalized.name} v{normalized.version}")
    table.add_column("Section")
    table.add_column("Weight", justify="right")
    table.add_column("Questions", justify="right")
    table.add_column("Foundational", justify="right")
    for section in normalized.sections:
        table.add_row(
            escape(section.title),
            f"{section.weight:.3f}",
            str(len(section.questions)),
            str(sum(1 for q in section.questions if q.is_foundational)),
        )
    console.print(table)
    console.print(f"  [green]OK[/green] Template {normalized.id} is valid")


@cli.command()
@click.argument("assessment_id")
@data_option
@click.pass_context
def score(ctx: click.Context, assessment_id: str, data: str) -> None:
    """Compute the score, risk level and confidence for an assessment."""
    with _cli_errors(ctx):
        report = _service(ctx, data).compute_score(assessment_id)

    if ctx.obj["format"] == "json":
        _echo_json(report.to_wire())
        return

    console.print()
    console.print(f"  Assessment: [white]{report.assessment_id}[/white]")
    console.print(f"  Score:      [bold]{report.overall_score:.2f}[/bold] / 100")
    console.print(f"  Risk:       [white]{report.risk_level.value}[/white] - {report.risk_message}")
    console.print(f"  Confidence: [white]{report.confidence_level.value}[/white]")
    console.print()
    table = Table()
    table.add_column("Section")
    table.add_column("Weight", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Answered", justify="right")
    for section in report.section_breakdown:
        table.add_row(
            escape(section.section_title),
            f"{section.weight:.3f}",
            f"{section.score:.1f}",
            f"{section.answered_count}/{section.question_count}",
        )
    console.print(table)


@cli.command()
@click.argument("assessment_id")
@data_option
@org_option
@click.pass_context
def gaps(ctx: click.Context, assessment_id: str, data: str, organization_id: str) -> None:
    """List the gap analysis for an assessment."""
    with _cli_errors(ctx):
        result = _service(ctx, data).get_gap_analysis(assessment_id, organization_id)

    if ctx.obj["format"] == "json":
        _echo_json([g.to_wire() for g in result])
        return

    if not result:
        console.print("  [green]No gaps found[/green]")
        return

    table = Table()
    table.add_column("Severity")
    table.add_column("Priority")
    table.add_column("Title")
    table.add_column("Effort")
    table.add_column("Cost")
    for gap in result:
        table.add_row(
            gap.severity.value,
            gap.priority.value,
            escape(gap.title),
            gap.estimated_effort.value if gap.estimated_effort else "-",
            gap.estimated_cost.value if gap.estimated_cost else "-",
        )
    console.print(table)


@cli.command()
@click.argument("assessment_id")
@data_option
@org_option
@click.pass_context
def matrix(ctx: click.Context, assessment_id: str, data: str, organization_id: str) -> None:
    """Show the remediation roadmap for an assessment."""
    with _cli_errors(ctx):
        result = _service(ctx, data).get_strategy_matrix(assessment_id, organization_id)

    if ctx.obj["format"] == "json":
        _echo_json(result.to_wire())
        return

    table = Table(title=escape(result.summary))
    table.add_column("Timeline")
    table.add_column("Gaps", justify="right")
    table.add_column("Effort (S/M/L)")
    table.add_column("Estimated Cost")
    table.add_column("Top Vendors")
    for bucket in result.buckets():
        effort = bucket.effort_distribution
        vendors = ", ".join(f"{escape(r.vendor.name)} ({r.gaps_covered})" for r in bucket.top_vendors)
        table.add_row(
            bucket.timeline,
            str(bucket.gap_count),
            f"{effort.SMALL}/{effort.MEDIUM}/{effort.LARGE}",
            escape(bucket.estimated_cost_range),
            vendors or bucket.empty_state or "-",
        )
    console.print(table)


@cli.command()
@click.argument("assessment_id")
@data_option
@org_option
@click.option("--out", type=click.Path(dir_okay=False), help="Write the report to a file")
@click.pass_context
def report(ctx: click.Context, assessment_id: str, data: str, organization_id: str, out: str | None) -> None:
    """Write a Markdown assessment report."""
    with _cli_errors(ctx):
        service = _service(ctx, data)
        if not service.gate.check_feature(organization_id, "report_export"):
            console.print("  [red]ERROR[/red] Report export requires a PREMIUM or ENTERPRISE plan")
            ctx.exit(EXIT_NOT_ENTITLED)

        score_report = service.compute_score(assessment_id)
        gap_list = service.get_gap_analysis(assessment_id, organization_id)
        roadmap = service.get_strategy_matrix(assessment_id, organization_id)
        template = service.store.get_template(score_report.template_id)

    content = generate_assessment_report(
        score_report,
        gap_list,
        roadmap,
        template_name=template.name if template else "",
        organization_id=organization_id,
    )
    if out:
        Path(out).write_text(content, encoding="utf-8")
        console.print(f"  [green]Saved[/green] {out}")
    else:
        click.echo(content)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
