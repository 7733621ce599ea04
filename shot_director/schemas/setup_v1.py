"""DirectorSetup schema v1.0.0: load, dump, validate."""
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from shot_director.direction.models import DirectorSetup

SCHEMA_VERSION = "1.0.0"


def load_setup(source: Union[str, bytes, dict, Path]) -> DirectorSetup:
    """Parse a DirectorSetup from JSON string, bytes, dict, or file Path.

    Raises:
        ValidationError: data does not conform to the DirectorSetup model.
        FileNotFoundError: Path does not exist.
    """
    if isinstance(source, Path):
        data = json.loads(source.read_text(encoding="utf-8"))
    elif isinstance(source, (str, bytes)):
        data = json.loads(source)
    else:
        data = source
    return DirectorSetup.model_validate(data)


def dump_setup(setup: DirectorSetup, *, indent: int = 2) -> str:
    """Serialize a DirectorSetup to canonical JSON (sort_keys=True).

    Fields left at None are omitted so the output stays valid against
    DirectorSetup.v1.json.
    """
    raw = json.loads(setup.model_dump_json(exclude_none=True))
    return json.dumps(raw, sort_keys=True, indent=indent, ensure_ascii=False)


def validate_setup(data: dict) -> List[str]:
    """Validate a raw dict against the DirectorSetup model.

    Returns a list of human-readable error strings (empty list = valid).
    Does not raise.
    """
    try:
        DirectorSetup.model_validate(data)
        return []
    except ValidationError as exc:
        return [f"{e['loc']}: {e['msg']}" for e in exc.errors()]
