"""Shared fixtures for transcript_tex tests."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Drop handlers the CLI attaches so they do not outlive captured streams."""

    yield
    logger = logging.getLogger("transcript_tex")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
