"""JSON reading and writing of service templates."""

import json
from pathlib import Path
from typing import Any, Union

from ..exceptions import TemplateFormatError


def to_json(template: dict[str, Any], indent: int = 2) -> str:
    return json.dumps(template, indent=indent)


def from_json(text: str) -> dict[str, Any]:
    try:
        template = json.loads(text)
    except json.JSONDecodeError as e:
        raise TemplateFormatError(f"invalid JSON: {e.msg} at line {e.lineno}") from e
    if not isinstance(template, dict):
        raise TemplateFormatError("a service template must be a JSON object")
    return template


def load_template(path: Union[str, Path]) -> dict[str, Any]:
    return from_json(Path(path).read_text(encoding="utf-8"))


def save_template(template: dict[str, Any], path: Union[str, Path]) -> None:
    Path(path).write_text(to_json(template) + "\n", encoding="utf-8")
