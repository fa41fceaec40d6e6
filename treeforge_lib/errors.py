"""
Error types raised while generating a tree.

Every error aborts the whole run. Files written before the failure stay on disk.
"""
from typing import Any, List, Sequence


class ScaffoldError(RuntimeError):
    """Base class for every failure raised by treeforge."""


class ConfigError(ScaffoldError):
    """Raised when the run configuration is unusable (bad exclusion pattern, missing source)."""


class TemplateEvaluationError(ScaffoldError):
    """Raised when a template fails to parse or to execute."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: failed to evaluate template: {message}")


class FilesystemError(ScaffoldError):
    """Raised when a read/write/mkdir/symlink/remove fails."""

    def __init__(self, path: str, action: str, cause: OSError) -> None:
        self.path = path
        self.action = action
        super().__init__(f"{path}: failed to {action}: {cause.strerror or cause}")


class UnsupportedEntryError(ScaffoldError):
    """Raised for device nodes, pipes, sockets and other non-tree entries."""

    def __init__(self, path: str, kind: str) -> None:
        self.path = path
        self.kind = kind
        super().__init__(f"{path}: unsupported file type {kind}")


class ExtensionError(ScaffoldError):
    def __init__(self, phase: str, extension: Any, cause: BaseException) -> None:
        self.phase = phase
        self.extension = extension
        super().__init__(f"extension {extension!r} failed during {phase}: {cause}")


class ScriptError(ScaffoldError):
    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"failed to run {path}: {message}")


class SymlinkError(ScaffoldError):
    """Base class for failures of the deferred symlink phase."""


class SymlinkCycleError(SymlinkError):
    def __init__(self, chain: Sequence[str]) -> None:
        self.chain: List[str] = list(chain)
        super().__init__("symlink cycle: " + " -> ".join(self.chain))


class DanglingSymlinkError(SymlinkError):
    def __init__(self, path: str, target: str) -> None:
        self.path = path
        self.target = target
        super().__init__(f"{path}: symlink target {target!r} was not produced")
