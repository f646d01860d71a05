import logging

import pytest

from ndtw.config import reset_option


@pytest.fixture(scope="session", autouse=True)
def set_up_tests():
    logging.disable(logging.CRITICAL)


@pytest.fixture(scope="function", autouse=True)
def reset_options():
    """Restores default config after each test."""
    yield
    reset_option("all")
