from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture()
def restore_root_logger() -> Iterator[None]:
    """Undo handlers installed by ``configure_logging``."""

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
