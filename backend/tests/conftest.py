import logging
import os
from unittest.mock import patch

import pytest


@pytest.fixture
def isolated_root_logger():
    """Restore root logger handlers and level after a test attaches its own."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def app_home(tmp_path):
    """Point ~ at a temp dir so ~/.rowshift resolves inside it."""
    real_expand = os.path.expanduser

    def _expand(p):
        if p.startswith("~"):
            return str(tmp_path) + p[1:]
        return real_expand(p)

    with patch("diagnostics.os.path.expanduser", side_effect=_expand):
        yield tmp_path / ".rowshift"
