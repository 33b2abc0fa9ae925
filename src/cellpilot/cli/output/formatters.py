"""Output formatting utilities for CLI."""

from __future__ import annotations

from typing import Any, Dict, List

import click

from cellpilot.core.formula.types import FormulaResult
from cellpilot.core.schema.types import (
    JoinSuggestion,
    Relationship,
    RelationshipKind,
    TableSchema,
)


class OutputFormatter:
    """Render analysis, formula and access results for the terminal.

    Example:
        >>> out = OutputFormatter()
        >>> out.section("🔗 Relationships:")
        >>> for rel in structure.relationships:
        ...     out.relationship(rel)
    """

    @staticmethod
    def success(message: str) -> None:
        click.echo(f"✓ {message}")

    @staticmethod
    def error(message: str, abort: bool = False) -> None:
        """Display error message on stderr.

        Args:
            message: Error message to display
            abort: Raise ``click.Abort`` after displaying the message
        """
        click.echo(f"❌ {message}", err=True)
        if abort:
            raise click.Abort()

    @staticmethod
    def section(title: str) -> None:
        click.echo(f"\n{title}")

    @staticmethod
    def line(text: str, indent: str = "   ") -> None:
        click.echo(f"{indent}{text}")

    @staticmethod
    def stats(stats_dict: Dict[str, Any], indent: str = "   ") -> None:
        """Display statistics in key: value format.

        Args:
            stats_dict: Label -> value
            indent: Indentation string for each line
        """
        for key, value in stats_dict.items():
            click.echo(f"{indent}{key}: {value}")

    @staticmethod
    def list_items(items: List[str], indent: str = "   ", bullet: str = "-") -> None:
        for item in items:
            click.echo(f"{indent}{bullet} {item}")

    @staticmethod
    def table_schema(schema: TableSchema, indent: str = "     ") -> None:
        """Display a table with one line per typed column.

        Args:
            schema: Scanned table
            indent: Indentation of the table line (columns are indented further)
        """
        click.echo(
            f"{indent}✓ {schema.name}: {schema.row_count} rows, "
            f"{len(schema.columns)} columns"
        )
        for column in schema.columns:
            click.echo(f"{indent}    - {column}: {schema.column_types[column].value}")

    @staticmethod
    def relationship(rel: Relationship, indent: str = "   ") -> None:
        icon = "✓" if rel.kind == RelationshipKind.EXACT else "~"
        similarity = f", similarity {rel.similarity:.2f}" if rel.similarity is not None else ""
        click.echo(
            f"{indent}{icon} {rel.table_a}.{rel.column_a} ↔ {rel.table_b}.{rel.column_b} "
            f"({rel.kind.value}, {rel.confidence.value}{similarity})"
        )

    @staticmethod
    def join_suggestion(suggestion: JoinSuggestion, indent: str = "   ") -> None:
        click.echo(
            f"{indent}- [{suggestion.kind}, {suggestion.confidence.value}] "
            f"{suggestion.description}"
        )
        click.echo(f"{indent}    {suggestion.formula}")

    @classmethod
    def formula_result(cls, result: FormulaResult) -> None:
        """Display a generated formula with its explanation and validation.

        Args:
            result: Synthesizer output
        """
        cls.section("🧮 Formula:")
        cls.line(result.formula)

        cls.section("📝 Explanation:")
        cls.line(result.explanation)

        if result.validation.valid:
            cls.success("No issues found")
        else:
            cls.section("❌ Issues:")
            cls.list_items(result.validation.issues)

        if result.validation.suggestions:
            cls.section("💡 Suggestions:")
            cls.list_items(result.validation.suggestions)

    @staticmethod
    def progress_start(message: str) -> None:
        click.echo(f"\n🔍 {message}")
