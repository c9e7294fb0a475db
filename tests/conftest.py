"""Pytest configuration and shared fixtures."""

import logging
import os

import pytest


# Never ship test spans anywhere
os.environ.setdefault("LOGFIRE_SEND_TO_LOGFIRE", "false")


@pytest.fixture(autouse=True)
def _capture_engine_logs(caplog):
    """Capture engine logs at INFO so tests can assert on them."""
    caplog.set_level(logging.INFO, logger="habitquest")
