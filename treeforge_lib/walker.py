import os
import stat
from typing import Callable


class SkipEntry(Exception):
    """
    Raised by a walk callback to skip the current entry.

    On a directory the whole subtree is skipped; on anything else only that entry.
    """


Visit = Callable[[str, os.stat_result], None]


def walk_dir(root: str, visit: Visit) -> None:
    """
    Depth-first, pre-order walk of root, calling visit(path, info) before descending.

    The root itself is visited first (with os.stat, so a symlinked root is followed).
    Children get os.lstat information and symlinks are never followed. Entries are
    visited in the order os.scandir returns them. Exceptions other than SkipEntry
    abort the walk.
    """
    root = os.fspath(root)
    _walk(root, os.stat(root), visit)


def _walk(path: str, info: os.stat_result, visit: Visit) -> None:
    try:
        visit(path, info)
    except SkipEntry:
        return
    if not stat.S_ISDIR(info.st_mode):
        return
    with os.scandir(path) as it:
        entries = list(it)
    for entry in entries:
        _walk(entry.path, entry.stat(follow_symlinks=False), visit)
