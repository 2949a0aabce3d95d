"""Tests for decoder configuration and logging setup."""

import logging

import pytest

from imgmeta.config import DecoderConfig
from imgmeta.log import LOGGER_NAMESPACE, configure_logging, get_logger


def test_defaults():
    config = DecoderConfig()
    assert config.max_ifd_chain == 1024
    assert config.log_level == "WARNING"


def test_from_env_reads_overrides():
    config = DecoderConfig.from_env({
        "IMGMETA_LOG_LEVEL": "debug",
        "IMGMETA_MAX_IFD_CHAIN": "8",
    })
    assert config.log_level == "DEBUG"
    assert config.max_ifd_chain == 8


def test_from_env_ignores_empty_values():
    config = DecoderConfig.from_env({"IMGMETA_LOG_LEVEL": ""})
    assert config.log_level == "WARNING"


def test_from_env_rejects_non_integer_chain():
    with pytest.raises(ValueError, match="IMGMETA_MAX_IFD_CHAIN"):
        DecoderConfig.from_env({"IMGMETA_MAX_IFD_CHAIN": "many"})


def test_chain_limit_must_be_positive():
    with pytest.raises(ValueError):
        DecoderConfig(max_ifd_chain=0)


def test_configure_logging_installs_single_handler():
    """Calling configure_logging twice does not stack handlers."""
    configure_logging("DEBUG")
    logger = configure_logging(logging.INFO)
    assert logger is logging.getLogger(LOGGER_NAMESPACE)
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_configure_logging_unknown_name_falls_back_to_warning():
    assert configure_logging("chatty").level == logging.WARNING


def test_get_logger_returns_child():
    assert get_logger("heic_parser").name == f"{LOGGER_NAMESPACE}.heic_parser"
    assert get_logger().name == LOGGER_NAMESPACE
