"""
Helpers for testing templates.

    scaffold("templates/service", str(tmp_path), {"Name": "orders"})
    assert_files_equal(str(tmp_path), [
        File("orders/main.go", 0o600, "package orders\n"),
    ])
"""
import os
import stat
from dataclasses import dataclass
from typing import List, Sequence

from .walker import walk_dir

# Only the owner permission bits and the symlink bit are compared
MODE_MASK = stat.S_IFLNK | stat.S_IRWXU


@dataclass(frozen=True)
class File:
    name: str
    mode: int
    content: str = ""

    def __str__(self) -> str:
        return f"{self.name:<32} {stat.filemode(self.mode)} {self.content!r}"


def _masked(mode: int) -> int:
    # S_IFLNK shares bits with S_IFREG, so test for the link type explicitly
    link = stat.S_IFLNK if stat.S_ISLNK(mode) else 0
    return link | (mode & stat.S_IRWXU)


def collect_files(directory: str) -> List[File]:
    """
    Every non-directory entry under directory, sorted by relative name.

    Symlinks are reported with the symlink bit set and the content of the file they
    point at.
    """
    found: List[File] = []

    def visit(path: str, info: os.stat_result) -> None:
        if stat.S_ISDIR(info.st_mode):
            return
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
        found.append(File(os.path.relpath(path, directory), _masked(info.st_mode), content))

    walk_dir(directory, visit)
    return sorted(found, key=lambda f: f.name)


def assert_files_equal(directory: str, expect: Sequence[File]) -> None:
    """Assert that directory holds exactly the expected files (see collect_files)."""
    actual = collect_files(directory)
    expected = sorted(
        (File(f.name, _masked(f.mode), f.content) for f in expect),
        key=lambda f: f.name,
    )
    if actual != expected:
        lines = ["files differ:", "expected:"]
        lines.extend(f"  {f}" for f in expected)
        lines.append("actual:")
        lines.extend(f"  {f}" for f in actual)
        raise AssertionError("\n".join(lines))
