"""Main CLI entry point for notion-native."""

import asyncio
from pathlib import Path

import click

from notion_native import __version__
from notion_native.core.errors import MigrationError
from notion_native.core.logging import get_logger, setup_logging
from notion_native.core.text.rendering import ExportFormat
from notion_native.models.config import AppConfig

from .utils import (
    console,
    echo_error,
    open_pipeline,
    print_migration_result,
    print_search_results,
    print_stats,
)

log = get_logger(__name__)


@click.group()
@click.version_option(__version__, "-v", "--version", prog_name="notion-native")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a YAML config file (default: ~/.notion-native/config.yaml)",
)
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx, config_path, log_level):
    """notion-native - migrate Notion pages into searchable native storage.

    Examples:
        notion-native migrate PAGE_ID PAGE_ID --batch-size 5
        notion-native export PAGE_ID --format markdown
        notion-native search "release notes" --embeddings
        notion-native stats
    """
    ctx.ensure_object(dict)
    try:
        config = AppConfig.load_from_file(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))

    setup_logging(log_level or config.log_level, config.log_file)
    ctx.obj["config"] = config


@cli.command()
@click.argument("page_ids", nargs=-1, required=True)
@click.option("--batch-size", type=click.IntRange(min=1), default=None, help="Pages per concurrent batch")
@click.pass_context
def migrate(ctx, page_ids, batch_size):
    """Migrate one or more Notion pages."""
    config: AppConfig = ctx.obj["config"]

    async def _run():
        async with open_pipeline(config) as pipeline:
            return await pipeline.migrate_many(list(page_ids), batch_size)

    run_log = log.bind(pages=len(page_ids), batch_size=batch_size or config.migration.batch_size)
    run_log.info("Starting batch migration")
    batch = asyncio.run(_run())
    run_log.info(
        "Batch migration finished",
        total=batch.summary.total,
        successful=batch.summary.successful,
        failed=batch.summary.failed,
    )
    print_migration_result(batch)
    if batch.summary.failed:
        ctx.exit(1)


@cli.command()
@click.argument("page_id")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in ExportFormat]),
    default=ExportFormat.MARKDOWN.value,
    show_default=True,
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def export(ctx, page_id, fmt, output):
    """Export a migrated page in the given format."""
    config: AppConfig = ctx.obj["config"]

    async def _run():
        async with open_pipeline(config) as pipeline:
            return await pipeline.get_content_in_format(page_id, fmt)

    try:
        content = asyncio.run(_run())
    except MigrationError as e:
        echo_error(e.message)
        ctx.exit(1)

    if output:
        output.write_text(content, encoding="utf-8")
        console.print(f"[green]✓ Wrote {output}[/green]")
    else:
        click.echo(content)


@cli.command()
@click.argument("query")
@click.option("--embeddings", is_flag=True, help="Also run a semantic vector search")
@click.option("--limit", type=click.IntRange(min=1), default=20, show_default=True)
@click.option("--threshold", type=click.FloatRange(0.0, 1.0), default=0.7, show_default=True)
@click.pass_context
def search(ctx, query, embeddings, limit, threshold):
    """Search migrated content."""
    config: AppConfig = ctx.obj["config"]

    async def _run():
        async with open_pipeline(config) as pipeline:
            return await pipeline.search_content(query, embeddings, limit, threshold)

    print_search_results(asyncio.run(_run()))


@cli.command()
@click.pass_context
def stats(ctx):
    """Show storage and content statistics."""
    config: AppConfig = ctx.obj["config"]

    async def _run():
        async with open_pipeline(config) as pipeline:
            return await pipeline.get_migration_stats()

    print_stats(asyncio.run(_run()))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
