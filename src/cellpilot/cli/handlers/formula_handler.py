"""Business logic for the formula command."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from cellpilot.connectors import CSVLoader
from cellpilot.core.formula import FormulaRequest, FormulaResult, FormulaSynthesizer
from cellpilot.core.schema import SchemaScanner
from cellpilot.utils.config import Config
from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)


class FormulaHandler:
    """Handler for formula synthesis.

    Example:
        >>> handler = FormulaHandler(config)
        >>> request = handler.load_request("lookup.yml")
        >>> result = handler.synthesize(request, tables_dir="./data/sheets")
    """

    def __init__(self, config: Config):
        """Initialize handler.

        Args:
            config: Configuration instance
        """
        self.config = config

    def load_request(self, request_file: str | Path) -> Dict[str, Any]:
        """Read a formula request from a YAML or JSON file.

        Args:
            request_file: Path to the request file

        Returns:
            Request mapping, parsed by the synthesizer

        Raises:
            ValueError: If the file does not contain a mapping
        """
        with open(request_file, "r") as f:
            data: Any = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Request file {request_file} must contain a mapping")

        logger.debug(f"Loaded {data.get('operation')!r} request from {request_file}")
        return data

    def synthesize(
        self,
        request: Union[FormulaRequest, Dict[str, Any]],
        tables_dir: Optional[str | Path] = None,
        pattern: str = "*.csv",
    ) -> FormulaResult:
        """Build a formula, resolving columns against CSV tables if given.

        Args:
            request: Formula request or request mapping
            tables_dir: Optional directory of CSV tables
            pattern: Glob pattern for table files

        Returns:
            FormulaResult
        """
        max_length = self.config.get("formula.max_length", 50000)

        if tables_dir is None:
            return FormulaSynthesizer(max_length=max_length).synthesize(request)

        loader = CSVLoader(tables_dir, file_pattern=pattern)
        logger.info(f"Resolving columns against tables in {tables_dir}")
        scanner = SchemaScanner(sample_size=self.config.get("analysis.sample_size", 10))
        schemas = scanner.scan(loader.load_raw_tables(sample_size=scanner.sample_size))

        synthesizer = FormulaSynthesizer(schemas=schemas, max_length=max_length)
        return synthesizer.synthesize(request, table_names=loader.get_table_names)

    def to_dict(self, result: FormulaResult) -> Dict:
        return result.to_dict()
