import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_backoffice_logger():
    """CLI runs configure logging; keep levels from leaking between tests."""
    logger = logging.getLogger("backoffice")
    level = logger.level
    yield
    logger.setLevel(level)
