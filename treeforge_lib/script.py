"""
Template functions written by template authors, in Python.

ScriptExtension runs a script that ships with the template (template.py by default)
and exports every public function it defines into the template function table.

Inside the script these names are predefined:
- every template function already registered (called positionally),
- context: the current template context. Rebinding it replaces the context,
- log: a logger for diagnostics.

The script itself is excluded from the output. To generate a file with the same
name, call the template file template.py.tmpl.
"""
import inspect
import os
import re
import runpy
from typing import TYPE_CHECKING, Any, Dict, Optional

from .errors import ScriptError
from .extensions import Extension
from .log import get_logger

if TYPE_CHECKING:
    import logging

    from .generator import Config

DEFAULT_SCRIPT_NAME = "template.py"


class ScriptExtension(Extension):
    def __init__(self, script_name: str = DEFAULT_SCRIPT_NAME, logger: Optional["logging.Logger"] = None) -> None:
        self.script_name = script_name
        self.logger = logger or get_logger("script")

    def __repr__(self) -> str:
        return f"ScriptExtension({self.script_name!r})"

    def extend(self, config: "Config") -> None:
        config.exclude.append("^" + re.escape(self.script_name) + "$")

        path = os.path.join(config.source, self.script_name)
        if not os.path.isfile(path):
            self.logger.debug("No template script at %s", path)
            return

        injected: Dict[str, Any] = dict(config.functions)
        injected["context"] = config.context
        injected["log"] = self.logger
        try:
            namespace = runpy.run_path(path, init_globals=injected, run_name="__template_script__")
        except Exception as e:
            raise ScriptError(path, f"{type(e).__name__}: {e}") from e

        exported = []
        for name, value in namespace.items():
            if name.startswith("_") or not callable(value) or inspect.isclass(value):
                continue
            if name in injected and injected[name] is value:
                continue
            config.functions[name] = value
            exported.append(name)
        if namespace.get("context") is not config.context:
            config.context = namespace.get("context")
            self.logger.debug("Template script %s replaced the context", path)
        self.logger.debug("Template script %s exported %s", path, ", ".join(sorted(exported)) or "nothing")
