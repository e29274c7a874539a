"""Main CLI module for timereport."""

import sys

import click

from .report_cmd import export_command, init_env_command

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
EPILOG = """
Examples:
  timereport init-env                       # Write an example .env
  timereport export --team T1 \\
      --start 2025-10-01T00:00:00Z --end 2025-10-31T23:59:59Z
  timereport export --team T1 --start ... --end ... --general --json
  timereport export --team T1 --start ... --end ... \\
      --user dev@example.com --project Website --tz-offset 120
""".strip()


@click.group(
    context_settings=CONTEXT_SETTINGS,
    help="timereport - aggregate time entries into CSV reports",
    epilog=EPILOG,
)
def cli() -> None:
    """Root CLI command."""


cli.add_command(export_command, "export")
cli.add_command(init_env_command, "init-env")


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    try:
        normalized_args = list(args) if args is not None else None
        return cli.main(args=normalized_args, standalone_mode=False) or 0
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except SystemExit as exc:  # pragma: no cover - click normalizes exit codes
        return int(exc.code) if exc.code is not None else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
