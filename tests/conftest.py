import logging
from datetime import datetime, timezone

import pytest

from jsonguard.models import clear_cache


@pytest.fixture(autouse=True)
def restore_package_logger():
    """The CLI reconfigures the package logger; put it back after each test."""
    logger = logging.getLogger("jsonguard")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def empty_schema_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def user_schema():
    return {
        "name": "string",
        "age": "?number",
        "tags": ["string"],
        "address": {"street": "string", "zip": "number"},
    }


@pytest.fixture
def sample_date():
    return datetime(2023, 1, 1, 10, 0, 0, 123000, tzinfo=timezone.utc)
