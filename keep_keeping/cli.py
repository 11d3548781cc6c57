"""
Command Line Interface

``keep-keeping PATH PATH`` synchronizes two paths and prints the report.
The exit status is 1 if any entry failed or the roots were rejected.

Author: Keep Keeping Project
License: MIT
"""

import sys

import click

from .config.config_loader import ConfigLoader
from .core.exceptions import SyncError
from .core.models import Action, ErrorPolicy, SyncOutcome
from .core.orchestrator import SyncOrchestrator
from .utils.logger import setup_logging


def _print_outcome(outcome: SyncOutcome, verbose: bool):
    """Echo one outcome; errors always go to stderr."""
    if not outcome.ok:
        click.echo(f"error: {outcome}", err=True)
    elif verbose or outcome.decision.action not in (Action.SKIP, Action.RECURSE):
        prefix = "would " if outcome.dry_run else ""
        click.echo(f"{prefix}{outcome}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("--config", "config_path", type=click.Path(dir_okay=False),
              help="YAML configuration file (or set KEEP_KEEPING_CONFIG).")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                                               case_sensitive=False),
              help="Override the configured logging level.")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON.")
@click.option("--workers", type=click.IntRange(min=1),
              help="Synchronize top-level entries on this many threads.")
@click.option("--dry-run", is_flag=True,
              help="Show what would be copied without changing anything.")
@click.option("--create-missing", is_flag=True,
              help="Create a missing root from the other one.")
@click.option("--fail-fast", is_flag=True, help="Stop at the first entry error.")
@click.option("-v", "--verbose", is_flag=True, help="Also list skipped and recursed entries.")
@click.version_option(package_name="keep-keeping")
def main(paths, config_path, log_level, json_logs, workers, dry_run, create_missing,
         fail_fast, verbose):
    """Synchronize two paths together: the newer side of each entry wins.

    Overwritten content is not kept anywhere.
    """
    if len(paths) < 2:
        click.echo("You must specify at least 2 paths to synchronize.", err=True)
        sys.exit(1)
    if len(paths) > 2:
        click.echo("Synchronizing more than 2 paths is not supported yet.", err=True)
        sys.exit(1)
    
    try:
        config = ConfigLoader(config_path).load()
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    
    app = config.app
    setup_logging(
        log_level=log_level or app.log_level,
        log_to_file=app.log_to_file,
        log_file_path=app.log_file_path,
        log_rotation_size=app.log_rotation_size,
        log_retention_count=app.log_retention_count,
        json_format=app.json_logs or json_logs
    )
    
    overrides = {
        key: value for key, value in (
            ("max_workers", workers),
            ("dry_run", dry_run or None),
            ("create_missing_root", create_missing or None),
        ) if value is not None
    }
    settings = config.sync.model_copy(update=overrides)
    
    def on_error(outcome: SyncOutcome):
        return ErrorPolicy.FAIL if fail_fast else ErrorPolicy.CONTINUE
    
    orchestrator = SyncOrchestrator(settings)
    try:
        report = orchestrator.synchronize(
            paths[0], paths[1],
            on_outcome=lambda outcome: _print_outcome(outcome, verbose),
            on_error=on_error
        )
    except SyncError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    
    copied = sum(1 for o in report if o.ok and o.decision.is_copy)
    unchanged = sum(1 for o in report if o.ok and o.decision.action is Action.SKIP)
    summary = f"{copied} copied, {unchanged} unchanged, {len(report.errors)} errors"
    if report.aborted:
        summary += " (stopped after first error)"
    click.echo(summary, err=True)
    
    sys.exit(report.exit_code)


if __name__ == "__main__":
    main()
