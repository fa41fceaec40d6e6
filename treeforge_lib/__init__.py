"""
treeforge: generate a file tree from a template tree.

Every file name, directory name, file content and symlink target in the template
tree is a Jinja2 template rendered against a user supplied context.

Public API:
- scaffold(source, destination, context, *, functions=None, extensions=(), exclude=(),
  after_each=(), template_suffix=".tmpl") -> None
- Config, Extension, ExtensionFunc, AfterEachFunc: hooks for extending a run
- ScriptExtension: template functions written in Python, shipped with the template
- DEFAULT_FUNCTIONS: case conversion helpers (snake, camel, kebab, ...)
- parse_params(param_args) -> dict, load_context(path) -> Any
- walk_dir(root, visit), SkipEntry: pre-order directory walk

The generator supports:
- A name that renders to the empty string drops the entry (and a directory's subtree).
- Exclusion regexes matched against the path relative to the template root, before rendering.
- A trailing ".tmpl" is stripped from rendered names.
- dir(name, context) in a name fans the entry out into one copy per call, each
  rendered against its own context.
- Symlink targets are rendered too; links are created after the whole tree exists,
  so they may point at generated files or at other generated links.
"""
from .context import load_context, parse_params
from .errors import (
    ConfigError,
    DanglingSymlinkError,
    ExtensionError,
    FilesystemError,
    ScaffoldError,
    ScriptError,
    SymlinkCycleError,
    SymlinkError,
    TemplateEvaluationError,
    UnsupportedEntryError,
)
from .extensions import AfterEachFunc, Extension, ExtensionFunc, ExtensionPipeline
from .functions import DEFAULT_FUNCTIONS
from .generator import Config, scaffold
from .script import ScriptExtension
from .walker import SkipEntry, walk_dir

__version__ = "0.1.0"

__all__ = [
    "scaffold",
    "Config",
    "Extension",
    "ExtensionFunc",
    "AfterEachFunc",
    "ExtensionPipeline",
    "ScriptExtension",
    "DEFAULT_FUNCTIONS",
    "parse_params",
    "load_context",
    "walk_dir",
    "SkipEntry",
    "ScaffoldError",
    "ConfigError",
    "TemplateEvaluationError",
    "FilesystemError",
    "UnsupportedEntryError",
    "ExtensionError",
    "ScriptError",
    "SymlinkError",
    "SymlinkCycleError",
    "DanglingSymlinkError",
]
