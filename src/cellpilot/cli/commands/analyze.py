"""Spreadsheet structure analysis command."""

from __future__ import annotations

import click

from cellpilot.cli.decorators import handle_errors, with_output_file, with_pattern
from cellpilot.cli.handlers import AnalysisHandler
from cellpilot.cli.output import OutputFormatter
from cellpilot.utils.config import get_config

out = OutputFormatter()


@click.command(name="analyze")
@click.argument("data_dir", type=click.Path(exists=True, file_okay=False))
@with_pattern
@with_output_file
@handle_errors
def analyze_cmd(data_dir, pattern, output):
    """Analyze tables and find cross-table relationships.

    Every CSV file in DATA_DIR is treated as one table (one spreadsheet tab).

    \b
    Examples:
        # Analyze a directory of exported sheets
        cellpilot analyze ./data/sheets

        # Save the full result as JSON
        cellpilot analyze ./data/sheets --output structure.json
    """
    handler = AnalysisHandler(get_config())

    out.progress_start(f"Analyzing tables in {data_dir}...")
    structure = handler.analyze_directory(data_dir, pattern=pattern)
    summary = handler.get_summary(structure)

    out.section("📊 Structure Summary:")
    out.stats(
        {
            "Tables": summary["num_tables"],
            "Relationships": summary["num_relationships"],
            "Common Columns": summary["num_common_columns"],
            "Join Suggestions": summary["num_suggestions"],
        }
    )

    out.section("   Tables:")
    for table in structure.tables:
        out.table_schema(table)

    if structure.relationships:
        out.section("🔗 Relationships:")
        for rel in structure.relationships:
            out.relationship(rel)

    if structure.common_columns:
        out.section("🧩 Common Columns:")
        for name, group in structure.common_columns.items():
            out.line(f"- {name}: {', '.join(group.distinct_tables)}")

    if structure.suggested_joins:
        out.section("💡 Suggested Joins:")
        for suggestion in structure.suggested_joins:
            out.join_suggestion(suggestion)

    saved = handler.save(structure, output)
    if saved:
        out.success(f"Structure saved to {saved}")
