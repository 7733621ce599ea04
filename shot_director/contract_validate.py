import json

import jsonschema

from .schema_loader import load_schema
from .schemas.shotlist_v1 import canonical_json_bytes


def validate_setup(data: dict) -> None:
    """Validate a raw DirectorSetup dict against the DirectorSetup.v1.json contract.

    Raises jsonschema.ValidationError if non-conformant.
    """
    jsonschema.validate(data, load_schema("DirectorSetup.v1.json"))


def validate_shotlist(data: dict) -> None:
    """Validate a ShotList dict against the canonical ShotList.v1.json contract.

    Raises jsonschema.ValidationError if non-conformant.
    """
    jsonschema.validate(data, load_schema("ShotList.v1.json"))


def validate_shotlist_model(sl) -> None:
    """Validate a ShotList model against the canonical ShotList.v1.json contract.

    The model is projected through its canonical JSON bytes first, so the
    check sees exactly what would be written to disk.

    Raises jsonschema.ValidationError if the projected artifact is non-conformant.
    """
    validate_shotlist(json.loads(canonical_json_bytes(sl).decode("utf-8")))
