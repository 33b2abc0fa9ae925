"""Shared pytest fixtures."""

import logging

import pytest

from cellpilot.core.schema import RawTable
from cellpilot.utils.config import Config, set_config


@pytest.fixture(autouse=True)
def default_config():
    """Run every test against default configuration."""
    config = Config()
    set_config(config)
    yield config
    set_config(None)
    # CLI tests install stream handlers bound to CliRunner's temporary streams
    logger = logging.getLogger("cellpilot")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def orders_customers():
    """Two related tables sharing a Customer ID column."""
    orders = RawTable(
        name="Orders",
        header_row=["Order ID", "Customer ID", "Amount"],
        sample_rows=[
            ["ORD-1001", "CUST-1", "$120.50"],
            ["ORD-1002", "CUST-2", "$80.00"],
            ["ORD-1003", "CUST-1", "$42.10"],
        ],
    )
    customers = RawTable(
        name="Customers",
        header_row=["Customer ID", "Email", "Name"],
        sample_rows=[
            ["CUST-1", "ann@example.com", "Ann"],
            ["CUST-2", "bo@example.com", "Bo"],
        ],
    )
    return [orders, customers]
