"""Cross-table relationship detection and join suggestions."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set, Tuple

from cellpilot.core.schema.scanner import SchemaScanner
from cellpilot.core.schema.similarity import column_similarity
from cellpilot.core.schema.types import (
    CommonColumnGroup,
    Confidence,
    JoinSuggestion,
    RawTable,
    Relationship,
    RelationshipKind,
    SpreadsheetStructure,
    TableSchema,
)
from cellpilot.utils.config import get_config
from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)


class RelationshipDetector:
    """Find likely join keys between tables from their column names."""

    def __init__(self, config: Optional[Dict] = None):
        """Initialize relationship detector.

        Args:
            config: Configuration dict (uses ``analysis.relationships`` from
                the global config if None)
        """
        self.config = config or get_config().get("analysis.relationships", {})
        self.fuzzy_threshold = self.config.get("fuzzy_threshold", 0.7)
        self.medium_threshold = self.config.get("medium_threshold", 0.85)
        self.key_keywords = [
            k.lower() for k in self.config.get("key_keywords", ["id", "key", "code"])
        ]

    def analyze(
        self,
        tables: Sequence[RawTable],
        scanner: Optional[SchemaScanner] = None,
    ) -> SpreadsheetStructure:
        """Run the full analysis: scan, detect, group, suggest.

        Args:
            tables: Raw table snapshots
            scanner: Optional SchemaScanner (a default one is created if None)

        Returns:
            SpreadsheetStructure

        Example:
            >>> detector = RelationshipDetector()
            >>> structure = detector.analyze([orders_raw, customers_raw])
            >>> structure.suggested_joins[0].formula
        """
        scanner = scanner or SchemaScanner()
        schemas = scanner.scan(tables)

        relationships = self.detect_relationships(schemas)
        common_columns = self.find_common_columns(schemas)
        suggested_joins = self.suggest_joins(common_columns)

        logger.info(
            f"Analysis complete: {len(schemas)} tables, {len(relationships)} relationships, "
            f"{len(common_columns)} common columns, {len(suggested_joins)} join suggestions"
        )

        return SpreadsheetStructure(
            tables=schemas,
            relationships=relationships,
            common_columns=common_columns,
            suggested_joins=suggested_joins,
        )

    def _is_key_column(self, column: str) -> bool:
        lowered = column.lower()
        return any(keyword in lowered for keyword in self.key_keywords)

    def detect_relationships(
        self, schemas: Sequence[TableSchema]
    ) -> List[Relationship]:
        """Compare every pair of tables for matching columns.

        Pairs are visited as (i, j) with i < j in input order. Key-like
        columns (names containing id/key/code) with the same name give an
        exact, high-confidence relationship. Any other column pair whose
        names are similar enough gives a "possible" relationship, unless
        that same (column_a, column_b) name pair was already recorded.

        Args:
            schemas: Table schemas

        Returns:
            List of Relationship objects
        """
        relationships: List[Relationship] = []
        # (column_a, column_b) name pairs already recorded, across all tables
        seen_pairs: Set[Tuple[str, str]] = set()

        for i in range(len(schemas)):
            for j in range(i + 1, len(schemas)):
                table1 = schemas[i]
                table2 = schemas[j]

                key_columns1 = [c for c in table1.columns if self._is_key_column(c)]
                key_columns2 = [c for c in table2.columns if self._is_key_column(c)]

                for col1 in key_columns1:
                    for col2 in key_columns2:
                        if col1.lower() == col2.lower():
                            relationships.append(
                                Relationship(
                                    kind=RelationshipKind.EXACT,
                                    table_a=table1.name,
                                    column_a=col1,
                                    table_b=table2.name,
                                    column_b=col2,
                                    confidence=Confidence.HIGH,
                                )
                            )
                            seen_pairs.add((col1, col2))

                for col1 in table1.columns:
                    for col2 in table2.columns:
                        if (col1, col2) in seen_pairs:
                            continue
                        similarity = column_similarity(col1, col2)
                        if similarity <= self.fuzzy_threshold:
                            continue

                        confidence = (
                            Confidence.MEDIUM
                            if similarity > self.medium_threshold
                            else Confidence.LOW
                        )
                        relationships.append(
                            Relationship(
                                kind=RelationshipKind.POSSIBLE,
                                table_a=table1.name,
                                column_a=col1,
                                table_b=table2.name,
                                column_b=col2,
                                confidence=confidence,
                                similarity=similarity,
                            )
                        )
                        seen_pairs.add((col1, col2))

        logger.info(f"Detected {len(relationships)} relationships")
        for rel in relationships:
            logger.debug(f"  {rel}")

        return relationships

    def find_common_columns(
        self, schemas: Sequence[TableSchema]
    ) -> Dict[str, CommonColumnGroup]:
        """Group columns by normalized name across tables.

        Args:
            schemas: Table schemas

        Returns:
            Dict mapping lowercased, trimmed column name -> CommonColumnGroup,
            only for names found in at least two distinct tables
        """
        groups: Dict[str, CommonColumnGroup] = {}

        for schema in schemas:
            for column in schema.columns:
                normalized = column.lower().strip()
                group = groups.setdefault(normalized, CommonColumnGroup())
                group.original_names.append(column)
                group.tables.append(schema.name)

        return {
            name: group
            for name, group in groups.items()
            if len(group.distinct_tables) >= 2
        }

    def suggest_joins(
        self, common_columns: Dict[str, CommonColumnGroup]
    ) -> List[JoinSuggestion]:
        """Suggest lookup/join templates for shared columns.

        Args:
            common_columns: Output of ``find_common_columns``

        Returns:
            List of JoinSuggestion objects (VLOOKUP for two tables,
            QUERY for three or more)
        """
        suggestions: List[JoinSuggestion] = []

        for group in common_columns.values():
            tables = group.distinct_tables
            column = group.original_names[0]

            if len(tables) == 2:
                suggestions.append(
                    JoinSuggestion(
                        kind="VLOOKUP",
                        description=f"Lookup {column} from {tables[0]} in {tables[1]}",
                        formula=f"=VLOOKUP(A2, '{tables[1]}'!A:Z, COLUMN_INDEX, FALSE)",
                        confidence=Confidence.HIGH,
                    )
                )
            elif len(tables) > 2:
                stacked = ";".join(f"'{t}'!A:Z" for t in tables)
                suggestions.append(
                    JoinSuggestion(
                        kind="QUERY",
                        description=f"Join data from {', '.join(tables)} using {column}",
                        formula=f'=QUERY({{{stacked}}}, "SELECT * WHERE Col1 IS NOT NULL")',
                        confidence=Confidence.MEDIUM,
                    )
                )

        return suggestions
