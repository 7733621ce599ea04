"""Run-length segmentation of the sampled activity stream.

The builder only needs a callable returning the active-actor set at a time,
so it can be driven by an ActivitySampler or by any stand-in.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, FrozenSet, Iterator, List

from shot_director.direction.models import Segment

logger = logging.getLogger(__name__)

ActiveAt = Callable[[float], FrozenSet[str]]


def sample_times(duration: float, resolution: float) -> Iterator[float]:
    """0, r, 2r, ... through the first multiple >= duration, clamped to duration.

    Times are computed as i * r rather than accumulated, so there is no drift
    over long timelines.
    """
    if duration <= 0:
        return
    if resolution <= 0:
        raise ValueError(f"sampling resolution must be positive, got {resolution}")
    count = math.ceil(duration / resolution)
    for i in range(count + 1):
        yield min(i * resolution, duration)


def build_segments(active_at: ActiveAt, duration: float, resolution: float) -> List[Segment]:
    """Sample *active_at* across [0, duration] and collapse equal runs.

    Returns an empty list when duration <= 0 (nothing to schedule).  A change
    first seen at a sample time >= duration opens no segment; the last open
    segment always closes exactly at duration.
    """
    if duration <= 0:
        logger.warning("Timeline duration %.3fs is not positive; nothing to schedule", duration)
        return []

    segments: List[Segment] = []
    times = sample_times(duration, resolution)
    current_start = next(times)
    current_set = frozenset(active_at(current_start))

    for time in times:
        if time >= duration:
            break
        active = frozenset(active_at(time))
        if active != current_set:
            segments.append(Segment(start_sec=current_start, end_sec=time, actors=current_set))
            current_start = time
            current_set = active

    segments.append(Segment(start_sec=current_start, end_sec=duration, actors=current_set))
    logger.debug("built %d raw segments over %.3fs", len(segments), duration)
    return segments
