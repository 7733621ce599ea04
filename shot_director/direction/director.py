"""Audio activity → ShotList director.

Public entry points
-------------------
    analyze_timeline(setup, sources) -> List[Segment]
    direct_timeline(setup, sources, rng=..., created_at=...) -> ShotList

Data flows strictly forward: sampler → segment builder → refiner → pool
resolver / shot scheduler / camera selector.  No stage mutates the output of
an earlier one.

Determinism guarantees
----------------------
- shot_id: f"shot_{index:03d}", zero-padded, monotonic
- shotlist_id: "sl_" + SHA-256(setup_id)[:16]
- cameras: drawn only from the injected random.Random (seeded from
  settings.seed when the caller passes none)
- created_at: always caller-supplied or the fixed epoch constant below;
  the director NEVER reads the system clock
"""
from __future__ import annotations

import hashlib
import logging
import random
from typing import Dict, List, Mapping, Optional, Sequence

from shot_director.direction.audio import ActivitySource, timeline_duration
from shot_director.direction.models import DirectorSetup, Segment, SegmentType, ShotList
from shot_director.direction.refiner import refine_segments
from shot_director.direction.sampler import ActivitySampler
from shot_director.direction.segments import build_segments
from shot_director.direction.selector import resolve_categories
from shot_director.direction.shots import schedule_shots
from shot_director.direction.timing import compute_timing_lock_hash

logger = logging.getLogger(__name__)

_DEFAULT_CREATED_AT: str = "1970-01-01T00:00:00Z"


# ── Analysis ──────────────────────────────────────────────────────────────────


def analyze_timeline(
    setup: DirectorSetup,
    sources: Mapping[str, ActivitySource],
) -> List[Segment]:
    """Sample every actor, segment the timeline and refine the segments.

    Returns an empty list when the timeline duration is not positive.
    """
    duration = timeline_duration(setup, dict(sources))
    settings = setup.settings
    sampler = ActivitySampler(setup.actors, sources, window_frames=settings.rms_window_frames)

    raw = build_segments(sampler.active_actors_at, duration, settings.sampling_resolution_sec)
    if not raw:
        return []
    segments = refine_segments(
        raw,
        duration,
        min_duration=settings.min_shot_duration_sec,
        silence_tolerance=settings.silence_tolerance_sec,
    )
    logger.info("Audio analysis complete. Found %d segments.", len(segments))
    return segments


def summarize_segments(segments: Sequence[Segment]) -> Dict[str, int]:
    """Segment counts per type, keyed by SegmentType value."""
    counts = {kind.value: 0 for kind in SegmentType}
    for segment in segments:
        counts[segment.segment_type.value] += 1
    return counts


# ── Shot generation ───────────────────────────────────────────────────────────


def direct_timeline(
    setup: DirectorSetup,
    sources: Mapping[str, ActivitySource],
    *,
    rng: Optional[random.Random] = None,
    created_at: str = _DEFAULT_CREATED_AT,
    segments: Optional[Sequence[Segment]] = None,
) -> ShotList:
    """Produce a validated ShotList for *setup*.

    Args:
        setup:      A validated DirectorSetup.
        sources:    Decoded activity sources keyed by actor_id.
        rng:        Random source for camera selection.  Defaults to
                    random.Random(setup.settings.seed).
        created_at: ISO 8601 string stamped on the artifact.
        segments:   Pre-computed refined segments; analysed from *sources*
                    when omitted.

    Returns:
        A ShotList whose shots are ordered and contiguous within each
        scheduled segment.  Spans without eligible cameras are listed in
        ``gaps`` rather than raising.
    """
    if rng is None:
        rng = random.Random(setup.settings.seed)
    duration = timeline_duration(setup, dict(sources))
    if segments is None:
        segments = analyze_timeline(setup, sources)

    categories = resolve_categories(setup)
    shots, gaps = schedule_shots(segments, setup, categories, rng)
    logger.info("Generated %d camera shots (%d gaps).", len(shots), len(gaps))

    shotlist = ShotList(
        shotlist_id=_make_shotlist_id(setup.setup_id),
        setup_id=setup.setup_id,
        duration_sec=max(duration, 0.0),
        segments=list(segments),
        shots=shots,
        gaps=gaps,
        timing_lock_hash=compute_timing_lock_hash(shots),
        created_at=created_at,
        metadata={
            "segment_counts": summarize_segments(segments),
            "seed": setup.settings.seed,
        },
    )
    # Local import avoids a circular import via direction/__init__.py → director
    # → contract_validate → shotlist_v1 → direction.models → __init__.py.
    from shot_director.contract_validate import validate_shotlist_model  # noqa: PLC0415
    validate_shotlist_model(shotlist)
    return shotlist


def _make_shotlist_id(setup_id: str) -> str:
    """Deterministic shotlist ID: "sl_" + first 16 hex chars of SHA-256(setup_id)."""
    digest = hashlib.sha256(setup_id.encode("utf-8")).hexdigest()
    return f"sl_{digest[:16]}"
