"""Segment → shot expansion.

Every segment is cut into equal-length shots and each shot gets a camera
from the segment's pool.  Segments with an empty pool become ScheduleGap
records instead of shots.
"""
from __future__ import annotations

import logging
import math
import random
from typing import List, Mapping, Sequence, Tuple

from shot_director.direction.models import DirectorSetup, ScheduleGap, Segment, Shot
from shot_director.direction.pools import pool_for
from shot_director.direction.selector import SelectorState, select_camera

logger = logging.getLogger(__name__)


def shot_count_for(duration: float, min_shot_duration: float) -> int:
    """floor(duration / min), at least 1; long segments get fewer, longer shots.

    Past 3x the minimum the count is capped at ceil(duration / (2 x min)).
    """
    count = max(1, math.floor(duration / min_shot_duration))
    if duration > min_shot_duration * 3:
        count = min(count, math.ceil(duration / (min_shot_duration * 2)))
    return count


def shot_spans(segment: Segment, min_shot_duration: float) -> List[Tuple[float, float]]:
    """Equal, contiguous (start, end) spans tiling the segment exactly.

    The last span ends on segment.end_sec so the tiling has no rounding gap.
    """
    count = shot_count_for(segment.duration_sec, min_shot_duration)
    length = segment.duration_sec / count
    spans: List[Tuple[float, float]] = []
    for i in range(count):
        start = segment.start_sec + i * length
        end = segment.end_sec if i == count - 1 else segment.start_sec + (i + 1) * length
        spans.append((start, end))
    return spans


def _make_shot_id(index: int) -> str:
    return f"shot_{index:03d}"


def schedule_shots(
    segments: Sequence[Segment],
    setup: DirectorSetup,
    categories: Mapping[str, str],
    rng: random.Random,
) -> Tuple[List[Shot], List[ScheduleGap]]:
    """Expand refined segments into an ordered shot list.

    One SelectorState is threaded through all shots, so the anti-repetition
    cap holds across segment boundaries.
    """
    settings = setup.settings
    shots: List[Shot] = []
    gaps: List[ScheduleGap] = []
    state = SelectorState()

    for segment in segments:
        pool = pool_for(segment, setup)
        if not pool:
            logger.warning(
                "No cameras available for segment at %.3fs (%s)",
                segment.start_sec, segment.segment_type.value,
            )
            gaps.append(
                ScheduleGap(
                    start_sec=segment.start_sec,
                    end_sec=segment.end_sec,
                    segment_type=segment.segment_type,
                    actors=list(segment.actors),
                )
            )
            continue

        for start, end in shot_spans(segment, settings.min_shot_duration_sec):
            camera_id, state = select_camera(pool, state, settings, categories, rng)
            shots.append(
                Shot(
                    shot_id=_make_shot_id(len(shots)),
                    start_sec=start,
                    end_sec=end,
                    camera_id=camera_id,
                    segment_type=segment.segment_type,
                )
            )

    return shots, gaps
