import os
from typing import Any, Dict, List, Optional, Sequence

import yaml


def parse_params(param_args: Optional[Sequence[str]]) -> Dict[str, Any]:
    """
    Parse a sequence of -p arguments into a context mapping.

    Accepted forms per item:
    - key=value
    - key:value
    - key value  (if provided as a single token containing whitespace)

    A key given once maps to its string value; a key repeated maps to the list of
    its values, in order, so templates can fan out over it.

    Example inputs:
    ["service=happiness", "group=peanuts", "adapter=http", "adapter=kafka"]
    -> {"service": "happiness", "group": "peanuts", "adapter": ["http", "kafka"]}
    """
    collected: Dict[str, List[str]] = {}
    if not param_args:
        return {}

    for raw in param_args:
        if raw is None:
            continue
        s = str(raw).strip()
        if not s:
            continue
        key: Optional[str] = None
        val: Optional[str] = None

        # Allow quotes around the entire token
        if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
            s = s[1:-1]

        for sep in ("=", ":"):
            if sep in s:
                left, right = s.split(sep, 1)
                if left.strip() and right.strip():
                    key, val = left.strip(), right.strip()
                    break
        if key is None or val is None:
            tokens = s.split()
            if len(tokens) == 2:
                key, val = tokens
        if key is None or val is None:
            raise ValueError(f"Invalid -p parameter format: {raw!r}. Expect key=value or key:value.")

        collected.setdefault(key, []).append(val)

    return {k: v[0] if len(v) == 1 else v for k, v in collected.items()}


def load_context(path: str) -> Any:
    """
    Load a template context from a JSON or YAML file.

    JSON is a subset of YAML, so both go through yaml.safe_load. An empty file
    yields an empty mapping.
    """
    if not os.path.isfile(path):
        raise ValueError(f"Context file does not exist: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Context file {path} is not valid JSON or YAML: {e}") from e
    return {} if data is None else data
