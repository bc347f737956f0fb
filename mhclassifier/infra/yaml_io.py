# mhclassifier/infra/yaml_io.py
from pathlib import Path
from typing import Any

import yaml

from mhclassifier.exceptions import KeywordProfileError


def load_yaml(path: Path) -> Any:
    """Load a YAML file and return the parsed Python object."""
    if not path.exists():
        raise KeywordProfileError(f"YAML file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise KeywordProfileError(f"YAML parse failed: {path}: {e}") from e
