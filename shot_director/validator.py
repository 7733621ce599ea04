"""DirectorSetup readiness rules (validate-setup command)."""
from __future__ import annotations

import json
from pathlib import Path
from typing import List


def validate_setup_rules(data: dict) -> List[str]:
    """Check that *data* describes a setup worth directing.

    These are readiness rules, not structural ones: the pipeline still runs
    on a setup that fails them and reports scheduling gaps instead.

    Returns a list of human-readable error strings; empty list means ready.
    Does NOT raise.
    """
    errors: List[str] = []

    actors = data.get("actors")
    if not isinstance(actors, list) or len(actors) == 0:
        errors.append("Please add at least one actor.")
    else:
        has_valid_actor = any(
            isinstance(actor, dict) and actor.get("clips") and actor.get("cameras")
            for actor in actors
        )
        if not has_valid_actor:
            errors.append("At least one actor needs an audio clip and a camera assigned.")

    stage = data.get("stage_cameras")
    if not isinstance(stage, list) or not any(stage):
        errors.append("Please add at least one stage camera for silent segments.")

    return errors


def validate_setup_file(setup_path: Path) -> List[str]:
    """Load JSON from *setup_path* and run validate_setup_rules().

    Raises:
        ValueError: if the file is missing or contains invalid JSON.
    """
    try:
        raw = setup_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ValueError(f"Setup file not found: {setup_path}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {setup_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError("Setup must be a JSON object")

    return validate_setup_rules(data)
