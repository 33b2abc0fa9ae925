"""CellPilot - spreadsheet structure analysis and cross-sheet formula synthesis."""

__version__ = "0.1.0"

# Connectors
from cellpilot.connectors import BaseConnector, CSVLoader, FrameConnector

# Core modules
from cellpilot.core import (
    ColumnType,
    FormulaRequest,
    FormulaResult,
    FormulaSynthesizer,
    RawTable,
    Relationship,
    RelationshipDetector,
    SchemaScanner,
    SpreadsheetStructure,
    TableSchema,
)

# Gating
from cellpilot.gating import FeatureGate, GateConfig, InMemorySettingsStore

# Utils
from cellpilot.utils.config import Config, get_config, load_config

__all__ = [
    # Version
    "__version__",
    # Core
    "ColumnType",
    "FormulaRequest",
    "FormulaResult",
    "FormulaSynthesizer",
    "RawTable",
    "Relationship",
    "RelationshipDetector",
    "SchemaScanner",
    "SpreadsheetStructure",
    "TableSchema",
    # Gating
    "FeatureGate",
    "GateConfig",
    "InMemorySettingsStore",
    # Connectors
    "BaseConnector",
    "CSVLoader",
    "FrameConnector",
    # Config
    "Config",
    "get_config",
    "load_config",
]
