"""Tests for logging setup."""

import logging

import pytest

from app_settings import LOG_FORMAT, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging(restore_root_logger):
    logger = setup_logging("debug")
    assert logger is logging.getLogger()
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT


def test_unknown_level_defaults_to_info(restore_root_logger):
    assert setup_logging("chatty").level == logging.INFO


def test_rejected_insulation_is_logged(caplog):
    from environmental_factor import EnvironmentalFactorParams, evaluate_environmental_factor

    with caplog.at_level(logging.WARNING, logger="environmental_factor"):
        evaluate_environmental_factor(EnvironmentalFactorParams(
            insulation_material="Styrofoam", insulation_thickness_in=1, process_temperature_f=100))
    assert "Unknown insulation material" in caplog.text
