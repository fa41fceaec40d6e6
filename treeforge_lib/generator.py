import os
import re
import stat
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional

from .errors import ConfigError, FilesystemError, UnsupportedEntryError
from .extensions import AfterEachFunc, ExtensionPipeline
from .log import get_logger
from .symlinks import DeferredSymlinks
from .template import TemplateEvaluator, has_template_markers, newline_sequence
from .walker import SkipEntry, walk_dir

logger = get_logger("generator")

# Template function that fans one source entry out into several destinations
FANOUT_FUNCTION = "dir"
DEFAULT_TEMPLATE_SUFFIX = ".tmpl"
DIRECTORY_MODE = 0o700

_FANOUT_SEPARATOR = "\0"


@dataclass
class Config:
    """
    Configuration of one generation run.

    Extensions receive it once, before the walk, and may change functions, exclude
    and context. It is treated as read-only afterwards.
    """

    context: Any
    functions: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    exclude: List[str] = field(default_factory=list)
    template_suffix: str = DEFAULT_TEMPLATE_SUFFIX
    source: str = ""
    destination: str = ""


class _Placement(NamedTuple):
    # A rendered destination directory and the context its children render against
    destination: str
    context: Any


def _fanout_unavailable(name: Any, context: Any = None) -> str:
    raise RuntimeError(f"{FANOUT_FUNCTION}() can only be used in file and directory names")


def scaffold(
    source: str,
    destination: str,
    context: Any,
    *,
    functions: Optional[Mapping[str, Callable[..., Any]]] = None,
    extensions: Iterable[Any] = (),
    exclude: Iterable[str] = (),
    after_each: Iterable[Callable[[str], None]] = (),
    template_suffix: str = DEFAULT_TEMPLATE_SUFFIX,
) -> None:
    """
    Render the template tree at source into destination using context.

    - functions are added to the template function table (later entries win).
    - extensions run their extend() hook before the walk and after_each() after
      every directory or file written; after_each callables are appended as
      after_each-only extensions.
    - exclude holds regular expressions searched in each entry's path relative to
      source, before any rendering; a match drops the entry and its subtree.
    - template_suffix is stripped from rendered destination names.

    The first error aborts the run; anything already written stays in place.
    """
    source = os.path.normpath(os.fspath(source))
    destination = os.path.normpath(os.fspath(destination))
    if not os.path.isdir(source):
        raise ConfigError(f"Template directory does not exist or is not a directory: {source}")
    if _is_within(destination, source):
        raise ConfigError(f"Destination {destination} must not be inside the template directory {source}")

    config = Config(
        context=context,
        functions={FANOUT_FUNCTION: _fanout_unavailable},
        exclude=list(exclude),
        template_suffix=template_suffix,
        source=source,
        destination=destination,
    )
    if functions:
        config.functions.update(functions)

    pipeline = ExtensionPipeline(extensions)
    pipeline.extensions.extend(AfterEachFunc(func) for func in after_each)
    pipeline.extend(config)

    generation = _Generation(config, pipeline, _compile_patterns(config.exclude))
    try:
        walk_dir(source, generation.visit)
    except OSError as e:
        raise FilesystemError(e.filename or source, "read template directory", e) from e
    generation.symlinks.apply()
    logger.info(
        "Generated %d directories and %d files from %s into %s",
        generation.directories,
        generation.files,
        source,
        destination,
    )


def _compile_patterns(patterns: Iterable[str]) -> List[re.Pattern[str]]:
    compiled: List[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError(f"invalid exclude pattern {pattern!r}: {e}") from e
    return compiled


class _Generation:
    """State of one scaffold() call, fed entry by entry from walk_dir."""

    def __init__(self, config: Config, pipeline: ExtensionPipeline, patterns: List[re.Pattern[str]]) -> None:
        self.config = config
        self.pipeline = pipeline
        self.patterns = patterns
        self.symlinks = DeferredSymlinks()
        self.evaluator = TemplateEvaluator(
            {name: func for name, func in config.functions.items() if name != FANOUT_FUNCTION}
        )
        # Source directory -> every destination it was rendered to
        self._placements: Dict[str, List[_Placement]] = {}
        self.directories = 0
        self.files = 0

    def visit(self, path: str, info: os.stat_result) -> None:
        if path == self.config.source:
            _make_directory(self.config.destination)
            self._placements[path] = [_Placement(self.config.destination, self.config.context)]
            return

        relative = os.path.relpath(path, self.config.source).replace(os.sep, "/")
        if self._is_excluded(relative):
            logger.debug("Excluded %s", relative)
            raise SkipEntry

        placed: List[_Placement] = []
        for parent in self._placements[os.path.dirname(path)]:
            placed.extend(self._place(path, relative, info, parent))

        if stat.S_ISDIR(info.st_mode):
            if not placed:
                raise SkipEntry
            self._placements[path] = placed

    def _is_excluded(self, relative: str) -> bool:
        return any(pattern.search(relative) for pattern in self.patterns)

    def _place(self, path: str, relative: str, info: os.stat_result, parent: _Placement) -> List[_Placement]:
        functions = dict(self.config.functions)
        fanout: Dict[str, Any] = {}

        def fan_out(name: Any, context: Any) -> str:
            fanout[str(name)] = context
            return f"{name}{_FANOUT_SEPARATOR}"

        functions[FANOUT_FUNCTION] = fan_out
        name = self.evaluator.evaluate(relative, os.path.basename(path), parent.context, functions)
        if name == "":
            logger.debug("Omitted %s (name rendered empty)", relative)
            return []

        if fanout:
            targets = [(os.path.join(parent.destination, sub), ctx) for sub, ctx in fanout.items()]
        else:
            targets = [(os.path.join(parent.destination, name), parent.context)]

        placed = []
        for target, context in targets:
            target = _strip_suffix(target, self.config.template_suffix)
            self._materialize(path, relative, info, target, context)
            placed.append(_Placement(target, context))
        return placed

    def _materialize(self, path: str, relative: str, info: os.stat_result, target: str, context: Any) -> None:
        mode = info.st_mode
        if stat.S_ISLNK(mode):
            self._defer_symlink(path, relative, target, context)
        elif stat.S_ISDIR(mode):
            _make_directory(target)
            self.directories += 1
            self.pipeline.after_each(target)
        elif stat.S_ISREG(mode):
            self._render_file(path, relative, target, context, stat.S_IMODE(mode))
            self.files += 1
            self.pipeline.after_each(target)
        else:
            raise UnsupportedEntryError(path, _describe_type(mode))

    def _render_file(self, path: str, relative: str, target: str, context: Any, mode: int) -> None:
        try:
            with open(path, "rb") as f:
                raw = f.read()
        except OSError as e:
            raise FilesystemError(path, "read file", e) from e

        text: Optional[str]
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            text = None
        if text is None or not has_template_markers(text):
            data = raw
        else:
            rendered = self.evaluator.evaluate(
                relative, text, context, self.config.functions, newline_sequence(text)
            )
            data = rendered.encode("utf-8")

        try:
            if os.path.islink(target):
                os.remove(target)
            with open(target, "wb") as f:
                f.write(data)
            os.chmod(target, mode)
        except OSError as e:
            raise FilesystemError(target, "write file", e) from e
        logger.debug("Rendered %s -> %s", relative, target)

    def _defer_symlink(self, path: str, relative: str, target: str, context: Any) -> None:
        try:
            link = os.readlink(path)
        except OSError as e:
            raise FilesystemError(path, "read symlink", e) from e

        link = self.evaluator.evaluate(relative, link, context, self.config.functions)
        if os.path.isabs(link):
            link = os.path.relpath(link, os.path.dirname(target))
        self.symlinks.defer(target, link)
        logger.debug("Deferred symlink %s -> %s", target, link)


def _make_directory(path: str) -> None:
    try:
        os.makedirs(path, mode=DIRECTORY_MODE, exist_ok=True)
    except OSError as e:
        raise FilesystemError(path, "create directory", e) from e


def _strip_suffix(path: str, suffix: str) -> str:
    if suffix and path.endswith(suffix):
        return path[: -len(suffix)]
    return path


def _describe_type(mode: int) -> str:
    if stat.S_ISFIFO(mode):
        return "fifo"
    if stat.S_ISSOCK(mode):
        return "socket"
    if stat.S_ISCHR(mode):
        return "character device"
    if stat.S_ISBLK(mode):
        return "block device"
    return stat.filemode(mode)


def _is_within(path: str, directory: str) -> bool:
    real_path = os.path.realpath(path)
    real_directory = os.path.realpath(directory)
    return os.path.commonpath([real_path, real_directory]) == real_directory
