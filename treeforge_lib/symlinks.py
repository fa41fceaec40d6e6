"""
Deferred symlink creation.

Symlinks are recorded during the walk and only created once the whole tree exists,
because a link may point at a path (or another link) that has not been written yet.
"""
import os
from typing import Dict, Iterator, List

from .errors import DanglingSymlinkError, FilesystemError, SymlinkCycleError
from .log import get_logger

logger = get_logger("symlinks")


class DeferredSymlinks:
    def __init__(self) -> None:
        self._pending: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and os.path.normpath(path) in self._pending

    def defer(self, path: str, target: str) -> None:
        """Record that path must become a symlink to target (already rendered)."""
        self._pending[os.path.normpath(path)] = target

    def apply(self) -> None:
        """
        Create every pending symlink, dependencies first, until nothing is pending.

        A link whose target is itself a pending link (or lives under one) is created
        after that link, so chains resolve leaf-outward. Cycles raise SymlinkCycleError
        and targets that do not exist once their dependencies are in place raise
        DanglingSymlinkError.
        """
        count = len(self._pending)
        while self._pending:
            path = next(iter(self._pending))
            self._resolve(path, [])
        if count:
            logger.debug("Created %d deferred symlinks", count)

    def _resolve(self, path: str, chain: List[str]) -> None:
        target = self._pending.get(path)
        if target is None:
            return
        if path in chain:
            raise SymlinkCycleError(chain[chain.index(path):] + [path])

        chain.append(path)
        target_path = os.path.normpath(os.path.join(os.path.dirname(path), target))
        for dependency in _lineage(target_path):
            self._resolve(dependency, chain)
        chain.pop()

        if not os.path.exists(target_path):
            raise DanglingSymlinkError(path, target)
        del self._pending[path]
        _create_symlink(path, target)


def _lineage(path: str) -> Iterator[str]:
    """Yield every ancestor of an absolute or relative path, outermost first, then path."""
    parents: List[str] = []
    current = path
    while True:
        parent = os.path.dirname(current)
        if not parent or parent == current:
            break
        parents.append(parent)
        current = parent
    yield from reversed(parents)
    yield path


def _create_symlink(path: str, target: str) -> None:
    if os.path.lexists(path):
        try:
            os.remove(path)
        except OSError as e:
            raise FilesystemError(path, "remove existing entry", e) from e
    try:
        os.symlink(target, path)
    except OSError as e:
        raise FilesystemError(path, "create symlink", e) from e
    logger.debug("Linked %s -> %s", path, target)
