"""Pytest configuration and fixtures."""

import logging

import pytest

from imgmeta.log import LOGGER_NAMESPACE


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by the CLI so they do not outlive a test's streams."""
    yield
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("IMGMETA_LOG_LEVEL", raising=False)
    monkeypatch.delenv("IMGMETA_MAX_IFD_CHAIN", raising=False)
