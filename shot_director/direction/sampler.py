"""Per-actor activity levels.

All functions are pure: the level at a time depends only on the source and
the time, so samples may be taken in any order.
"""
from __future__ import annotations

import math
from typing import Dict, FrozenSet, Iterable, Optional

import numpy as np

from shot_director.direction.audio import ActivitySource, AudioClip
from shot_director.direction.models import Actor

DEFAULT_WINDOW_FRAMES: int = 1024


def rms_level(clip: AudioClip, clip_time: float, window_frames: int = DEFAULT_WINDOW_FRAMES) -> float:
    """Root-mean-square amplitude over a short window starting at *clip_time*.

    The window is truncated at the end of the clip.  Positions outside the
    clip return 0.
    """
    position = math.floor(clip_time * clip.sample_rate)
    if position < 0 or position >= clip.frames:
        return 0.0
    size = min(window_frames, clip.frames - position)
    window = clip.samples[position:position + size].astype(np.float64)
    return float(np.sqrt(np.mean(window * window)))


def source_level(
    source: Optional[ActivitySource],
    time: float,
    window_frames: int = DEFAULT_WINDOW_FRAMES,
) -> float:
    """Level of the first clip covering *time*; 0 when no clip does."""
    if source is None:
        return 0.0
    for placed in source.clips:
        if placed.covers(time):
            return rms_level(placed.clip, time - placed.start_sec + placed.clip_in_sec, window_frames)
    return 0.0


class ActivitySampler:
    """Answers "who is active at time t" for a fixed cast."""

    def __init__(
        self,
        actors: Iterable[Actor],
        sources: Dict[str, ActivitySource],
        window_frames: int = DEFAULT_WINDOW_FRAMES,
    ) -> None:
        self._actors = tuple(actors)
        self._sources = dict(sources)
        self._window_frames = window_frames

    def level(self, actor_id: str, time: float) -> float:
        return source_level(self._sources.get(actor_id), time, self._window_frames)

    def active_actors_at(self, time: float) -> FrozenSet[str]:
        # No early exit: every actor is measured.
        return frozenset(
            actor.actor_id
            for actor in self._actors
            if self.level(actor.actor_id, time) > actor.threshold
        )

    __call__ = active_actors_at
