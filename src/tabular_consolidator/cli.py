"""Command-line interface for the tabular consolidator.

This CLI provides three commands:

1. `tabular-consolidate merge`: Consolidate spreadsheets into one workbook
   - Load every sheet of each .xlsx file (and each .csv file)
   - Merge rows describing the same entity across sources
   - Optionally review the result with an OpenAI model (--enrich)
   - Write the consolidated workbook and an optional JSON report

2. `tabular-consolidate analyze`: Inspect the sources without merging
   - Column frequency and similarity groups
   - Canonical column mapping
   - Relationships between sources and the detected primary key

3. `tabular-consolidate ask`: Ask a question about the consolidated data
"""

import argparse
import asyncio
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import EnrichmentConfig
from .consolidator import consolidate
from .exceptions import ConsolidationError, EnrichmentConfigError
from .exporters import result_to_json, write_workbook
from .loaders import load_sources
from .logging_config import configure_logging
from .models import ConsolidatedResult, SourceTable

console = Console()


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Spreadsheet files to consolidate (.xlsx, .xlsm or .csv)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )


def _create_merge_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the merge subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    merge_parser = subparsers.add_parser(
        "merge",
        help="Consolidate spreadsheets into one workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Consolidate every sheet of the given files into one table:

  1. Load each worksheet / CSV file as a source table
  2. Group similar column names and pick canonical display names
  3. Detect the primary key and merge rows for the same entity
  4. Optionally review the merge with an OpenAI model (--enrich)
  5. Write the "Consolidated Data" workbook
        """,
    )
    _add_common_arguments(merge_parser)

    merge_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("consolidated.xlsx"),
        help="Workbook to write (default: ./consolidated.xlsx)",
    )

    merge_parser.add_argument(
        "--json",
        type=Path,
        dest="json_output",
        help="Also write the full consolidation report as JSON",
    )

    merge_parser.add_argument(
        "--enrich",
        action="store_true",
        help="Review the merge with an OpenAI model (requires OPENAI_API_KEY)",
    )


def _create_analyze_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the analyze subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Show schema analysis without writing anything",
    )
    _add_common_arguments(analyze_parser)


def _create_ask_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the ask subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    ask_parser = subparsers.add_parser(
        "ask",
        help="Ask a question about the consolidated data (requires OPENAI_API_KEY)",
    )
    _add_common_arguments(ask_parser)
    ask_parser.add_argument("question", help="Question to ask about the data")


def _print_sources(sources: list[SourceTable]) -> None:
    table = Table(title="Sources")
    table.add_column("Source")
    table.add_column("Rows", justify="right")
    table.add_column("Columns", justify="right")
    for source in sources:
        table.add_row(source.source_id, str(source.row_count), str(source.column_count))
    console.print(table)


def _print_result(result: ConsolidatedResult) -> None:
    diagnostics = result.diagnostics
    table = Table(title="Consolidation", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Records", str(diagnostics.record_count))
    table.add_row("Columns", str(len(result.headers)))
    table.add_row("Primary key", result.primary_key or "-")
    table.add_row("Strategy", result.strategy.value)
    table.add_row("Rows merged", str(diagnostics.rows_merged))
    table.add_row("Rows skipped", str(diagnostics.rows_skipped))
    table.add_row("Conflicts resolved", str(diagnostics.conflicts_resolved))
    table.add_row("Enriched", "yes" if diagnostics.enriched else "no")
    console.print(table)

    console.print(f"\n[bold]Summary:[/] {result.summary}")
    if result.insights:
        console.print("\n[bold]Insights:[/]")
        for insight in result.insights:
            console.print(f"  - {insight}")
    if result.recommendations:
        console.print("\n[bold]Recommendations:[/]")
        for recommendation in result.recommendations:
            console.print(f"  - {recommendation}")


def _run_merge_command(args: argparse.Namespace) -> None:
    """Run the merge subcommand.

    Args:
        args: Parsed command-line arguments.
    """
    console.print("[bold cyan]Tabular Consolidation[/]")
    sources = load_sources(args.files)
    _print_sources(sources)

    result = consolidate(sources)

    if args.enrich:
        from .enrichment import ConsolidationEnricher

        config = EnrichmentConfig.from_env()
        if not config.enabled:
            console.print("[yellow]OPENAI_API_KEY not set - skipping enrichment[/]")
        else:
            console.print(f"Reviewing merge with [cyan]{config.model}[/]...")
            result = asyncio.run(ConsolidationEnricher(config).enrich(sources, result))

    _print_result(result)

    path = write_workbook(args.output, result.records, result.headers)
    console.print(f"\n[green]Workbook saved to: {path}[/]")

    if args.json_output:
        args.json_output.parent.mkdir(parents=True, exist_ok=True)
        args.json_output.write_text(result_to_json(result), encoding="utf-8")
        console.print(f"[green]Report saved to: {args.json_output}[/]")


def _run_analyze_command(args: argparse.Namespace) -> None:
    """Run the analyze subcommand.

    Args:
        args: Parsed command-line arguments.
    """
    sources = load_sources(args.files)
    _print_sources(sources)

    result = consolidate(sources)
    analysis = result.analysis

    frequency = Table(title="Column frequency")
    frequency.add_column("Column")
    frequency.add_column("Sources", justify="right")
    frequency.add_column("Canonical name")
    for column, count in analysis.column_frequency.items():
        frequency.add_row(column, str(count), result.column_mapping.get(column, column))
    console.print(frequency)

    if analysis.similarity_groups:
        console.print("\n[bold]Similarity groups:[/]")
        for representative, members in analysis.similarity_groups.items():
            console.print(f"  {representative}: {', '.join(members)}")

    if analysis.relationships:
        console.print("\n[bold]Relationships:[/]")
        for relationship in analysis.relationships:
            console.print(
                f"  {relationship.source_a} <-> {relationship.source_b}: "
                f"{', '.join(relationship.common_columns)} "
                f"(confidence {relationship.confidence:.2f})"
            )

    console.print(f"\nPrimary key: [cyan]{result.primary_key or 'none'}[/]")
    console.print(f"Strategy: [cyan]{result.strategy.value}[/]")


def _run_ask_command(args: argparse.Namespace) -> None:
    """Run the ask subcommand.

    Args:
        args: Parsed command-line arguments.
    """
    from .enrichment import ReportAssistant

    sources = load_sources(args.files)
    result = consolidate(sources)
    assistant = ReportAssistant(EnrichmentConfig.from_env())
    answer = asyncio.run(assistant.answer_question(result, args.question))
    console.print(answer)


COMMANDS = {
    "merge": _run_merge_command,
    "analyze": _run_analyze_command,
    "ask": _run_ask_command,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="tabular-consolidate",
        description="Consolidate spreadsheets into one table of merged entities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  merge      Consolidate files and write the merged workbook
  analyze    Show column analysis, relationships and the primary key
  ask        Ask a question about the consolidated data

Examples:
  tabular-consolidate merge customers.xlsx orders.csv -o merged.xlsx
  tabular-consolidate merge *.xlsx --json report.json --enrich
  tabular-consolidate analyze customers.xlsx orders.csv
  tabular-consolidate ask customers.xlsx "Which customer spent the most?"

Optional environment variables:
  OPENAI_API_KEY       - Enables --enrich and the ask command
  CONSOLIDATOR_MODEL   - Model used for enrichment (default: gpt-4o)
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    _create_merge_parser(subparsers)
    _create_analyze_parser(subparsers)
    _create_ask_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the tabular consolidator CLI.

    Args:
        argv: Arguments to parse; defaults to ``sys.argv[1:]``.
    """
    # Load .env file for API keys
    load_dotenv()

    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        COMMANDS[args.command](args)
    except EnrichmentConfigError:
        console.print("\n[red]Error: OpenAI configuration missing[/]")
        console.print("Set: [cyan]OPENAI_API_KEY[/]")
        raise SystemExit(1) from None
    except ConsolidationError as e:
        console.print(f"\n[red]Error: {e}[/]")
        raise SystemExit(1) from None
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/]")
        raise SystemExit(1) from None
    except Exception as e:
        console.print(f"\n[red]Error: {e}[/]")
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
