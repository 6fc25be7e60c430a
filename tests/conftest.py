"""Test configuration for pytest."""

import logging
import os
import pytest


@pytest.fixture(autouse=True)
def configure_test_logging():
    """Configure logging for tests to be minimal."""
    os.environ['DUPSWEEP_LOG_LEVEL'] = 'WARNING'

    logging.getLogger().setLevel(logging.WARNING)

    # The sweep and deletion loggers are chatty at INFO
    for logger_name in ['dupsweep.dedup.scheduler', 'dupsweep.dedup.deletion', 'dupsweep.dedup.unit']:
        logging.getLogger(logger_name).setLevel(logging.ERROR)
