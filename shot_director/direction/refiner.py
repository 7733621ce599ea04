"""Segment smoothing: minimum-duration merge, silence tolerance, coalesce.

Each pass takes a full segment sequence and returns a new one; segments are
frozen value objects, so "extending" a segment always means building a
replacement.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from shot_director.direction.models import Segment, SegmentType

logger = logging.getLogger(__name__)

_BOUNDARY_TOLERANCE: float = 1e-9


def merge_short_segments(segments: Sequence[Segment], min_duration: float) -> List[Segment]:
    """Pass A: absorb segments shorter than *min_duration* into what follows.

    A short buffer swallows a following segment with the same activity.  A
    buffer shorter than half of *min_duration* swallows the next segment
    whatever it is and takes on its activity.
    """
    if len(segments) < 2:
        return list(segments)

    merged: List[Segment] = []
    current = segments[0]
    for nxt in segments[1:]:
        if current.duration_sec < min_duration and current.same_activity(nxt):
            current = current.model_copy(update={"end_sec": nxt.end_sec})
        elif current.duration_sec < min_duration * 0.5:
            current = Segment(start_sec=current.start_sec, end_sec=nxt.end_sec, actors=nxt.actors)
        else:
            merged.append(current)
            current = nxt
    merged.append(current)
    return merged


def apply_silence_tolerance(segments: Sequence[Segment], tolerance: float) -> List[Segment]:
    """Pass B: hand short silent gaps to a neighbouring non-silent segment.

    The "before" neighbour wins when it is non-silent and either the "after"
    neighbour is missing or silent, or "before" is at least as long.
    Otherwise a non-silent "after" neighbour wins.  Boundaries never move.

    Reclassification is done left to right on a working copy, so a gap may
    see its left neighbour's new activity.
    """
    result = list(segments)
    for i, segment in enumerate(result):
        if segment.segment_type is not SegmentType.SILENT or segment.duration_sec >= tolerance:
            continue
        before: Optional[Segment] = result[i - 1] if i > 0 else None
        after: Optional[Segment] = result[i + 1] if i < len(result) - 1 else None

        if (
            before is not None
            and before.segment_type is not SegmentType.SILENT
            and (
                after is None
                or after.segment_type is SegmentType.SILENT
                or before.duration_sec >= after.duration_sec
            )
        ):
            result[i] = segment.model_copy(update={"actors": before.actors})
        elif after is not None and after.segment_type is not SegmentType.SILENT:
            result[i] = segment.model_copy(update={"actors": after.actors})
    return result


def coalesce_segments(segments: Sequence[Segment]) -> List[Segment]:
    """Join neighbours whose activity is identical.  Idempotent."""
    if len(segments) < 2:
        return list(segments)

    merged: List[Segment] = []
    current = segments[0]
    for nxt in segments[1:]:
        if current.same_activity(nxt):
            current = current.model_copy(update={"end_sec": nxt.end_sec})
        else:
            merged.append(current)
            current = nxt
    merged.append(current)
    return merged


def check_contiguity(segments: Sequence[Segment], duration: float) -> None:
    """Fail fast when segments do not tile [0, duration] exactly.

    A violation is an implementation bug, so this raises AssertionError
    explicitly (it must survive ``python -O``).
    """
    if not segments:
        if duration > 0:
            raise AssertionError("no segments cover a positive duration")
        return
    if not math.isclose(segments[0].start_sec, 0.0, abs_tol=_BOUNDARY_TOLERANCE):
        raise AssertionError(f"first segment starts at {segments[0].start_sec}, not 0")
    if not math.isclose(segments[-1].end_sec, duration, abs_tol=_BOUNDARY_TOLERANCE):
        raise AssertionError(f"last segment ends at {segments[-1].end_sec}, not {duration}")
    for prev, nxt in zip(segments, segments[1:]):
        if not math.isclose(prev.end_sec, nxt.start_sec, abs_tol=_BOUNDARY_TOLERANCE):
            raise AssertionError(
                f"gap or overlap between {prev.end_sec} and {nxt.start_sec}"
            )
    for segment in segments:
        if segment.start_sec > segment.end_sec:
            raise AssertionError(f"segment [{segment.start_sec}, {segment.end_sec}) runs backwards")


def refine_segments(
    segments: Sequence[Segment],
    duration: float,
    min_duration: float,
    silence_tolerance: float,
) -> List[Segment]:
    """Pass A, then Pass B, then coalesce; contiguity is re-checked before returning."""
    merged = merge_short_segments(segments, min_duration)
    logger.debug("minimum-duration merge: %d -> %d segments", len(segments), len(merged))
    tolerated = apply_silence_tolerance(merged, silence_tolerance)
    refined = coalesce_segments(tolerated)
    logger.debug("silence tolerance + coalesce: %d -> %d segments", len(merged), len(refined))
    check_contiguity(refined, duration)
    return refined
