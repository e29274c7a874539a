"""CLI commands for report export."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from ..config.settings import generate_example_env, load_settings
from ..observability.loguru_config import configure_loguru
from ..pipelines.report_pipeline import create_report_pipeline
from .cli_common import CLIContext, ExitCode

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.command("export", context_settings=CONTEXT_SETTINGS)
@click.option("--team", "team_id", required=True, help="Team ID whose projects are reported")
@click.option("--start", "start_date", required=True, help="Window start (ISO-8601)")
@click.option("--end", "end_date", required=True, help="Window end (ISO-8601)")
@click.option("--user", "user_emails", multiple=True, help="Restrict to user email (repeatable)")
@click.option("--project", "project_names", multiple=True, help="Restrict to project name (repeatable)")
@click.option("--tz-offset", type=int, default=None, help="Display offset in minutes east of UTC")
@click.option("--general", is_flag=True, help="General report (issue tokens, no dates)")
@click.option("--clamp-negative", is_flag=True, help="Count negative clipped spans as zero")
@click.option("--env-file", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Path to .env file")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON (machine-readable)")
@click.option("--trace-id", type=str, help="Trace ID for correlation")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def export_command(
    click_ctx: click.Context,
    team_id: str,
    start_date: str,
    end_date: str,
    user_emails: tuple[str, ...],
    project_names: tuple[str, ...],
    tz_offset: int | None,
    general: bool,
    clamp_negative: bool,
    env_file: Path | None,
    json_output: bool,
    trace_id: str | None,
    verbose: bool,
) -> int:
    """Fetch time entries, aggregate them and write a CSV report."""
    ctx = CLIContext(json_output=json_output, trace_id=trace_id, verbose=verbose)

    try:
        settings = load_settings(env_file)
        if clamp_negative:
            settings.clamp_negative_durations = True

        configure_loguru(
            log_dir=settings.log_dir,
            level="DEBUG" if verbose else settings.log_level,
            enable_console=not json_output,
        )

        pipeline = create_report_pipeline(settings)
        result = asyncio.run(
            pipeline.export_report(
                team_id,
                list(user_emails),
                list(project_names),
                start_date,
                end_date,
                timezone_offset=tz_offset,
                detailed=not general,
            )
        )
    except Exception as exc:
        click_ctx.exit(ctx.fail(exc))

    if json_output:
        ctx.output(result.to_dict())
    else:
        ctx.output(result.path)
        if verbose:
            click.echo(f"{result.entries_count} entries -> {result.rows_count} rows ({result.mode.value})")

    click_ctx.exit(int(ExitCode.SUCCESS))


@click.command("init-env", context_settings=CONTEXT_SETTINGS)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(".env"),
    show_default=True,
    help="Where to write the example .env",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_env_command(output: Path, force: bool) -> None:
    """Write an example .env with every setting."""
    if output.exists() and not force:
        raise click.ClickException(f"{output} already exists (use --force to overwrite)")

    generate_example_env(output)
    click.echo(f"Wrote {output}")
