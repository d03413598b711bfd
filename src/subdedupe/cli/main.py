"""Command-line interface for subdedupe.

Provides the cleanup pipeline and two inspection helpers.
"""

import importlib.metadata
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from subdedupe.engine import PipelineResult

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("subdedupe")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


@click.group()
@click.version_option(version=__version__, prog_name="subdedupe")
def cli() -> None:
    """Data-quality cleanup for subsidy record corpora.

    Use 'subdedupe COMMAND --help' for command-specific help.
    """


def _echo_report(result: "PipelineResult") -> None:
    verb = "would be" if result.dry_run else "were"
    title = "Cleanup report (dry run)" if result.dry_run else "Cleanup report"

    click.echo(title)
    click.echo(f"  Records loaded:  {result.total_records}")
    click.echo(f"  Junk detected:   {result.junk_detected}")
    click.echo(f"  Clusters found:  {result.clusters_found}")
    click.echo(f"  Records deleted: {result.records_deleted} ({verb} deleted)")
    click.echo(f"  Records updated: {result.records_updated} ({verb} updated)")
    click.echo(f"  Failed ids:      {len(result.failed_ids)}")
    for error in result.errors:
        click.secho(f"    {error['id']}: {error['message']}", fg="yellow")


@cli.command()
@click.argument("store_path", type=click.Path(dir_okay=False))
@click.option(
    "--dry-run",
    is_flag=True,
    help="Compute and validate the plan without changing the store",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default="out",
    help="Output directory for plan, reports and audit log (default: out)",
)
@click.option(
    "--threshold",
    type=float,
    default=0.75,
    help="Title similarity above which records are duplicates (default: 0.75)",
)
@click.option(
    "--no-missing-amount-pass",
    is_flag=True,
    help="Do not flag listing-style titles of records without max_amount",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def clean(
    store_path: str,
    dry_run: bool,
    output_dir: str,
    threshold: float,
    no_missing_amount_pass: bool,
    verbose: bool,
) -> None:
    """Remove junk and duplicate records from STORE_PATH and normalize fields.

    STORE_PATH is a JSON Lines file with one subsidy record per line. The
    store is rewritten in place unless --dry-run is given. Every run writes
    artifacts/cleanup_plan.json, reports/cleanup_summary.json, events.jsonl
    and run.json under OUTPUT_DIR.

    Examples
    --------
        subdedupe clean subsidies.jsonl --dry-run
        subdedupe clean subsidies.jsonl -o runs/today --threshold 0.8
    """
    from subdedupe.audit import RunContext
    from subdedupe.engine import PipelineConfig, run_pipeline
    from subdedupe.store import JsonlRecordStore

    try:
        config = PipelineConfig(
            similarity_threshold=threshold,
            dry_run=dry_run,
            missing_amount_pass=not no_missing_amount_pass,
            output_dir=Path(output_dir),
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--threshold") from e

    store = JsonlRecordStore(store_path)

    if verbose:
        click.echo("Starting cleanup pipeline...", err=True)
        click.echo(f"  Store: {store_path}", err=True)
        click.echo(f"  Output: {output_dir}", err=True)
        click.echo(f"  Threshold: {threshold}", err=True)
        click.echo(f"  Dry run: {dry_run}", err=True)

    try:
        with RunContext.start(
            output_dir=config.output_dir,
            parameters=config.to_dict(),
            dry_run=dry_run,
        ) as ctx:
            snapshot = store.snapshot_info()
            ctx.set_snapshot(snapshot)

            ctx.start_stage("cleanup")
            result = run_pipeline(store, config=config, logger=ctx.audit_logger)
            ctx.finish_stage(
                "cleanup",
                counters={
                    "records_loaded": result.total_records,
                    "junk_detected": result.junk_detected,
                    "clusters_found": result.clusters_found,
                    "records_deleted": result.records_deleted,
                    "records_updated": result.records_updated,
                    "failed_ids": len(result.failed_ids),
                },
            )
            snapshot.total_records = result.total_records

            for path in result.output_files.values():
                ctx.register_artifact(Path(path))

            ctx.finish(
                status="success" if result.success else "failed",
                records_processed=result.total_records,
            )

    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)

    if not result.success:
        click.secho(f"✗ Cleanup failed: {result.error_message}", fg="red", err=True)
        sys.exit(1)

    _echo_report(result)

    if verbose:
        click.echo("\nOutputs:", err=True)
        for name, path in result.output_files.items():
            click.echo(f"  {name}: {path}", err=True)
        click.echo(f"  audit log: {ctx.audit_logger.log_path}", err=True)
        click.echo(f"  manifest: {ctx.manifest_writer.manifest_path}", err=True)


@cli.command()
@click.argument("title_a")
@click.argument("title_b")
@click.option(
    "--threshold",
    type=float,
    default=0.75,
    help="Duplicate threshold used for the verdict (default: 0.75)",
)
def similarity(title_a: str, title_b: str, threshold: float) -> None:
    """Show the normalized forms of two titles and their similarity.

    Examples
    --------
        subdedupe similarity "【令和6年度】省エネ補助金" "省エネ補助金"
    """
    from subdedupe.normalize import normalize_title
    from subdedupe.scoring import similarity as title_similarity

    score = title_similarity(title_a, title_b)

    click.echo(f"A: {normalize_title(title_a)}")
    click.echo(f"B: {normalize_title(title_b)}")
    click.echo(f"similarity: {score:.4f}")
    if score > threshold:
        click.secho("duplicate", fg="yellow")
    else:
        click.secho("distinct", fg="green")


@cli.command()
@click.argument("title")
@click.option(
    "--no-amount",
    is_flag=True,
    help="Treat the record as having no max_amount",
)
def classify(title: str, no_amount: bool) -> None:
    """Report the junk rule TITLE matches, if any.

    Examples
    --------
        subdedupe classify "創業支援制度について"
        subdedupe classify "補助金一覧" --no-amount
    """
    from subdedupe.junk import JunkClassifier
    from subdedupe.models import SubsidyRecord

    record = SubsidyRecord(id="cli", title=title, max_amount=None if no_amount else 1)
    rule = JunkClassifier().classify(record)

    if rule is None:
        click.secho("not junk", fg="green")
    else:
        click.secho(f"junk ({rule.category.value})", fg="yellow")
        click.echo(f"rule: {rule.name}")


if __name__ == "__main__":
    cli()
