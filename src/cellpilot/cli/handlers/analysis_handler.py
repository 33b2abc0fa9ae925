"""Business logic for the analyze command."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from cellpilot.connectors import BaseConnector, CSVLoader
from cellpilot.core.schema import RelationshipDetector, SchemaScanner, SpreadsheetStructure
from cellpilot.utils.config import Config
from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)


class AnalysisHandler:
    """Handler for spreadsheet structure analysis.

    Example:
        >>> handler = AnalysisHandler(config)
        >>> structure = handler.analyze_directory("./data/sheets")
    """

    def __init__(self, config: Config):
        """Initialize handler.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.scanner = SchemaScanner(sample_size=config.get("analysis.sample_size", 10))
        self.detector = RelationshipDetector(config.get("analysis.relationships", {}))

    def analyze(self, connector: BaseConnector) -> SpreadsheetStructure:
        """Analyze every table a connector provides.

        Args:
            connector: Table source

        Returns:
            SpreadsheetStructure
        """
        raw_tables = connector.load_raw_tables(sample_size=self.scanner.sample_size)
        logger.info(f"Analyzing {len(raw_tables)} tables from {connector}")
        return self.detector.analyze(raw_tables, scanner=self.scanner)

    def analyze_directory(
        self, data_dir: str | Path, pattern: str = "*.csv"
    ) -> SpreadsheetStructure:
        """Analyze a directory of CSV files, one table per file."""
        return self.analyze(CSVLoader(data_dir, file_pattern=pattern))

    def save(
        self, structure: SpreadsheetStructure, output_file: Optional[str]
    ) -> Optional[Path]:
        """Save the structure as JSON if an output path was given."""
        if not output_file:
            return None
        path = Path(output_file)
        structure.save(path)
        return path

    def get_summary(self, structure: SpreadsheetStructure) -> Dict:
        """Get summary statistics for an analysis result.

        Args:
            structure: Analysis result

        Returns:
            Dictionary with summary statistics
        """
        return {
            "num_tables": len(structure.tables),
            "num_relationships": len(structure.relationships),
            "num_common_columns": len(structure.common_columns),
            "num_suggestions": len(structure.suggested_joins),
        }
