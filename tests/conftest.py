from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.tree_builder import TreeBuilder


@pytest.fixture
def tree(tmp_path: Path) -> TreeBuilder:
    """Provide a template tree builder rooted at the pytest tmp_path."""
    return TreeBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_treeforge_logger() -> Iterator[None]:
    """Drop handlers the CLI attaches so they do not outlive captured streams."""
    yield
    logger = logging.getLogger("treeforge")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
