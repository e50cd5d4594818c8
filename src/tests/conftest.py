import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Remove the stream handler configure_logging() installs during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
