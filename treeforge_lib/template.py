"""
Template evaluation on top of Jinja2.

Path segments, file contents and symlink targets all go through TemplateEvaluator.evaluate.
"""
from typing import Any, Callable, Dict, Mapping

from jinja2 import Environment, StrictUndefined

from .errors import TemplateEvaluationError

# Name under which the whole context is always reachable from a template
CONTEXT_VARIABLE = "ctx"


class TemplateEvaluator:
    def __init__(self, filters: Mapping[str, Callable[..., Any]] | None = None) -> None:
        self._env = Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        if filters:
            self._env.filters.update(filters)
        self._overlays: Dict[str, Environment] = {"\n": self._env}

    def evaluate(
        self,
        name: str,
        text: str,
        context: Any,
        functions: Mapping[str, Callable[..., Any]],
        newline_sequence: str = "\n",
    ) -> str:
        """
        Render text against context with the given function table.

        name identifies the template in error messages (usually the relative source path).
        Jinja2 rewrites every line ending in the template data to newline_sequence, so
        callers rendering file contents pass the file's own line ending.
        Parse and execution failures, including exceptions raised by template functions,
        are raised as TemplateEvaluationError.
        """
        try:
            template = self._environment(newline_sequence).from_string(text)
            return template.render(_namespace(context, functions))
        except TemplateEvaluationError:
            raise
        except Exception as e:  # noqa: BLE001
            raise TemplateEvaluationError(name, f"{type(e).__name__}: {e}") from e

    def _environment(self, newline_sequence: str) -> Environment:
        env = self._overlays.get(newline_sequence)
        if env is None:
            env = self._env.overlay(newline_sequence=newline_sequence)
            self._overlays[newline_sequence] = env
        return env


def has_template_markers(text: str) -> bool:
    return "{{" in text or "{%" in text or "{#" in text


def newline_sequence(text: str) -> str:
    """The first line ending used in text: "\\r\\n", "\\r" or "\\n" (the default)."""
    index = text.find("\n")
    cr = text.find("\r")
    if cr == -1:
        return "\n"
    if cr + 1 == index:
        return "\r\n"
    if index == -1 or cr < index:
        return "\r"
    return "\n"


def _namespace(context: Any, functions: Mapping[str, Callable[..., Any]]) -> Dict[str, Any]:
    namespace: Dict[str, Any] = {}
    if isinstance(context, Mapping):
        for key, value in context.items():
            if isinstance(key, str):
                namespace[key] = value
    namespace[CONTEXT_VARIABLE] = context
    # Functions shadow context keys of the same name
    namespace.update(functions)
    return namespace
