"""Tests for table connectors."""

import pandas as pd
import pytest

from cellpilot.cli.handlers import AnalysisHandler
from cellpilot.connectors import CSVLoader, FrameConnector


def test_csv_loader(tmp_path):
    (tmp_path / "b_orders.csv").write_text("Order ID,Amount\nORD-1,10\nORD-2,20\n")
    (tmp_path / "a_customers.csv").write_text("Customer ID\nCUST-1\n")
    (tmp_path / "notes.txt").write_text("ignored")

    loader = CSVLoader(tmp_path)

    assert loader.get_table_names() == ["a_customers", "b_orders"]
    tables = loader.load_tables()
    assert list(tables) == ["a_customers", "b_orders"]
    assert len(tables["b_orders"]) == 2
    assert list(loader.load_single_table("b_orders").columns) == ["Order ID", "Amount"]


def test_csv_loader_empty_file(tmp_path):
    (tmp_path / "empty.csv").write_text("")

    (raw,) = CSVLoader(tmp_path).load_raw_tables()

    assert raw.name == "empty"
    assert raw.header_row == []
    assert raw.row_count == 0


def test_csv_loader_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        CSVLoader(tmp_path / "missing")

    file_path = tmp_path / "file.csv"
    file_path.write_text("a\n1\n")
    with pytest.raises(NotADirectoryError):
        CSVLoader(file_path)

    with pytest.raises(ValueError, match="No CSV files found"):
        CSVLoader(tmp_path, file_pattern="*.tsv").load_tables()

    with pytest.raises(FileNotFoundError):
        CSVLoader(tmp_path).load_single_table("nope")


def test_frame_connector_raw_tables():
    df = pd.DataFrame({"Order ID": [f"ORD-{i}" for i in range(25)], "Amount": range(25)})

    (raw,) = FrameConnector({"Orders": df}).load_raw_tables(sample_size=5)

    assert raw.row_count == 25
    assert len(raw.sample_rows) == 5
    assert raw.sample_rows[0] == ["ORD-0", 0]


def test_analysis_handler_summary(orders_customers, default_config):
    frames = {
        raw.name: pd.DataFrame(raw.sample_rows, columns=raw.header_row)
        for raw in orders_customers
    }
    handler = AnalysisHandler(default_config)

    structure = handler.analyze(FrameConnector(frames))

    assert handler.get_summary(structure) == {
        "num_tables": 2,
        "num_relationships": 1,
        "num_common_columns": 1,
        "num_suggestions": 1,
    }
    assert handler.save(structure, None) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
