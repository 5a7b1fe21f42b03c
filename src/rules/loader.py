import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

# Rules may also be kept inside a ```yaml fenced block of a markdown document
_FENCED_YAML = re.compile(r"^```ya?ml[ \t]*\n(.*?)^```", re.MULTILINE | re.DOTALL)


def extract_yaml(text: str) -> str:
    """The first fenced YAML block of `text`, or `text` itself when there is none."""
    match = _FENCED_YAML.search(text)
    return match.group(1) if match else text


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.

    Raises:
        FileNotFoundError: the file does not exist.
        ValueError: the YAML does not parse or does not match the schema.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        data = yaml.safe_load(extract_yaml(path.read_text(encoding="utf-8")))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Rules validation failed: {path.name} must hold a mapping")

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e
