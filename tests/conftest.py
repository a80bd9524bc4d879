"""Pytest configuration shared by the helper tests."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from autotest_commons.util.constants import RESOURCE_PATH_ENV  # noqa: E402

RESOURCES_DIR = Path(__file__).resolve().parent / "resources"

logging.basicConfig(
    level=logging.DEBUG,
    handlers=[logging.StreamHandler(sys.stdout)],
    format="%(asctime)s | %(levelname)s | %(filename)s:%(funcName)s(line:%(lineno)d) |  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,
)


@pytest.fixture(autouse=True)
def resource_path(monkeypatch):
    """Make ``tests/resources`` the first resource root for every test."""
    monkeypatch.setenv(RESOURCE_PATH_ENV, str(RESOURCES_DIR))
    return RESOURCES_DIR
