"""Utility functions for the notion-native CLI."""

from contextlib import asynccontextmanager

from rich.console import Console
from rich.table import Table

from notion_native.core.database import DatabaseManager
from notion_native.core.pipeline import MigrationPipeline
from notion_native.core.services.embeddings import EmbeddingService
from notion_native.core.services.notion import NotionClient
from notion_native.models.config import AppConfig
from notion_native.models.domain import BatchMigrationResult, ContentSearchResult, MigrationStats

console = Console()


def echo_success(message: str) -> None:
    console.print(f"[green]✓ {message}[/green]")


def echo_error(message: str) -> None:
    console.print(f"[red]✗ {message}[/red]")


def echo_warning(message: str) -> None:
    console.print(f"[yellow]⚠ {message}[/yellow]")


def echo_info(message: str) -> None:
    console.print(f"[blue]ℹ {message}[/blue]")


@asynccontextmanager
async def open_pipeline(config: AppConfig):
    """Build a MigrationPipeline on the shipped adapters and close them afterwards."""
    database = DatabaseManager(config.resolved_database_url, config.database)
    await database.initialize()
    notion = NotionClient(config.resolved_notion_token, config.notion)
    embedder = EmbeddingService(config.resolved_openai_api_key, config.embeddings)

    try:
        yield MigrationPipeline(notion, database, embedder, config.migration)
    finally:
        await notion.close()
        await database.close()


def print_migration_result(batch: BatchMigrationResult) -> None:
    """Print per-page results followed by the summary."""
    table = Table(title="Migration Results")
    table.add_column("Page")
    table.add_column("Status")
    table.add_column("Blocks", justify="right")
    table.add_column("Embeddings", justify="right")
    table.add_column("Errors")

    for result in batch.results:
        status = "[green]ok[/green]" if result.success else "[red]failed[/red]"
        table.add_row(
            result.notion_page_id or "-",
            status,
            str(result.blocks_processed or 0),
            str(result.embeddings_generated or 0),
            "; ".join(result.errors or []),
        )

    console.print(table)

    summary = batch.summary
    message = (
        f"{summary.successful}/{summary.total} pages migrated "
        f"({summary.total_blocks} blocks, {summary.total_embeddings} embeddings)"
    )
    if summary.failed:
        echo_warning(message)
    else:
        echo_success(message)


def print_search_results(results: ContentSearchResult) -> None:
    if not results.text_results and not results.embedding_results:
        console.print("[yellow]No results found.[/yellow]")
        return

    if results.text_results:
        table = Table(title="Text Matches")
        table.add_column("Page")
        table.add_column("Type")
        table.add_column("Text")
        for hit in results.text_results:
            table.add_row(hit.page_title or "-", hit.block.type, hit.block.plain_text[:120])
        console.print(table)

    if results.embedding_results:
        table = Table(title="Semantic Matches")
        table.add_column("Similarity", justify="right")
        table.add_column("Chunk")
        for hit in results.embedding_results:
            table.add_row(f"{hit.similarity:.3f}", hit.chunk_text[:120])
        console.print(table)


def print_stats(stats: MigrationStats) -> None:
    table = Table(title="Migration Statistics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Pages", str(stats.storage.total_pages))
    table.add_row("Blocks", str(stats.storage.total_blocks))
    table.add_row("Embeddings", str(stats.storage.total_embeddings))
    table.add_row("Last sync", stats.storage.last_sync or "-")
    table.add_row("Total words", str(stats.content.total_words))
    table.add_row("Average words per page", str(stats.content.average_words_per_page))
    console.print(table)

    if stats.content.top_content_types:
        types_table = Table(title="Top Block Types")
        types_table.add_column("Type")
        types_table.add_column("Count", justify="right")
        for entry in stats.content.top_content_types:
            types_table.add_row(entry.type, str(entry.count))
        console.print(types_table)
