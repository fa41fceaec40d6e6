"""
Extension pipeline.

An extension can touch a run in two places:
- extend(config): called once, before anything is written. May add functions,
  add exclusion patterns or replace the context.
- after_each(path): called after every directory or regular file is written.
  Symlinks are created after the walk and are not reported.

Extensions only need to implement the hook they care about.
"""
from typing import TYPE_CHECKING, Any, Callable, Iterable, List

from .errors import ExtensionError
from .log import get_logger

if TYPE_CHECKING:
    from .generator import Config

logger = get_logger("extensions")


class Extension:
    """Base class for extensions. Both hooks default to doing nothing."""

    def extend(self, config: "Config") -> None:
        pass

    def after_each(self, path: str) -> None:
        pass


class ExtensionFunc(Extension):
    """Wrap a plain function as an extend-only extension."""

    def __init__(self, func: Callable[["Config"], None]) -> None:
        self._func = func

    def extend(self, config: "Config") -> None:
        self._func(config)

    def __repr__(self) -> str:
        return f"ExtensionFunc({getattr(self._func, '__name__', self._func)!r})"


class AfterEachFunc(Extension):
    """Wrap a plain function as an after_each-only extension."""

    def __init__(self, func: Callable[[str], None]) -> None:
        self._func = func

    def after_each(self, path: str) -> None:
        self._func(path)

    def __repr__(self) -> str:
        return f"AfterEachFunc({getattr(self._func, '__name__', self._func)!r})"


class ExtensionPipeline:
    """Runs extensions in registration order, stopping at the first failure."""

    def __init__(self, extensions: Iterable[Any] = ()) -> None:
        self.extensions: List[Any] = list(extensions)

    def extend(self, config: "Config") -> None:
        for extension in self.extensions:
            hook = getattr(extension, "extend", None)
            if hook is None:
                continue
            logger.debug("Extending configuration with %r", extension)
            try:
                hook(config)
            except Exception as e:
                raise ExtensionError("extend", extension, e) from e

    def after_each(self, path: str) -> None:
        for extension in self.extensions:
            hook = getattr(extension, "after_each", None)
            if hook is None:
                continue
            try:
                hook(path)
            except Exception as e:
                raise ExtensionError("after_each", extension, e) from e
