"""timing_lock_hash computation.

All functions are pure: no I/O, no external state, no randomness.

Only shot_id and the shot boundaries feed into the hash; the camera choice is
intentionally excluded so cameras can be re-rolled over the same segmentation
without breaking the timing lock.
"""
from __future__ import annotations

import hashlib
import json
from typing import List

from shot_director.direction.models import Shot


def compute_timing_lock_hash(shots: List[Shot]) -> str:
    """Compute a deterministic SHA-256 hash over shot timing data.

    Only shot_id, start_sec and end_sec (rounded to 3 dp) are included.

    Canonical JSON guarantees:
      - sort_keys=True → key order independent of insertion order
      - separators=(',', ':') → no whitespace → byte-identical across platforms

    Returns a lowercase 64-character hex string.
    """
    timing_data = [
        {
            "shot_id": shot.shot_id,
            "start_sec": round(shot.start_sec, 3),
            "end_sec": round(shot.end_sec, 3),
        }
        for shot in shots
    ]
    canonical = json.dumps(timing_data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
