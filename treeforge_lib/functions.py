"""
Case conversion and other helpers exposed to templates by the command line.

    {{ Name | snake }}        my_service
    {{ camel(Name) }}         MyService
    {{ Name | screamingKebab }} MY-SERVICE
"""
import re
from typing import Any, Callable, Dict, List

# Splits "HTTPServerName", "http_server-name" and "http server 2name" into words
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def _words(value: Any) -> List[str]:
    return _WORD_PATTERN.findall(str(value))


def snake(value: Any) -> str:
    return "_".join(w.lower() for w in _words(value))


def screaming_snake(value: Any) -> str:
    return "_".join(w.upper() for w in _words(value))


def kebab(value: Any) -> str:
    return "-".join(w.lower() for w in _words(value))


def screaming_kebab(value: Any) -> str:
    return "-".join(w.upper() for w in _words(value))


def camel(value: Any) -> str:
    """UpperCamelCase, e.g. my-service -> MyService."""
    return "".join(w[:1].upper() + w[1:].lower() for w in _words(value))


def lower_camel(value: Any) -> str:
    words = _words(value)
    if not words:
        return ""
    return words[0].lower() + camel("_".join(words[1:]))


def upper(value: Any) -> str:
    return str(value).upper()


def lower(value: Any) -> str:
    return str(value).lower()


def title(value: Any) -> str:
    # Uppercase the first letter of each word, leave the rest unchanged
    return re.sub(r"\b([a-z])", lambda m: m.group(1).upper(), str(value))


def typename(value: Any) -> str:
    """Name of the value's type, e.g. for dispatching on context objects."""
    return type(value).__name__


DEFAULT_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "snake": snake,
    "screamingSnake": screaming_snake,
    "camel": camel,
    "lowerCamel": lower_camel,
    "kebab": kebab,
    "screamingKebab": screaming_kebab,
    "upper": upper,
    "lower": lower,
    "title": title,
    "typename": typename,
}
