"""Decoded audio clips placed on the timeline.

An ActivitySource is the standalone counterpart of a host audio track: an
ordered list of clips, each with a timeline position and an offset into the
decoded file.  Everything here is immutable once built.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import numpy as np
import soundfile as sf

from shot_director.direction.models import AudioClipPlacement, DirectorSetup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioClip:
    """Decoded samples shaped (frames, channels)."""

    samples: np.ndarray
    sample_rate: int

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])

    @property
    def length_sec(self) -> float:
        return self.frames / float(self.sample_rate)

    @classmethod
    def from_array(cls, samples: np.ndarray, sample_rate: int) -> "AudioClip":
        data = np.asarray(samples, dtype=np.float32)
        if data.ndim == 1:
            data = data[:, np.newaxis]
        return cls(samples=data, sample_rate=int(sample_rate))


@dataclass(frozen=True)
class PlacedClip:
    clip: AudioClip
    start_sec: float
    end_sec: float
    clip_in_sec: float = 0.0

    def covers(self, time: float) -> bool:
        return self.start_sec <= time < self.end_sec


@dataclass(frozen=True)
class ActivitySource:
    clips: Tuple[PlacedClip, ...] = ()

    @property
    def end_sec(self) -> float:
        return max((c.end_sec for c in self.clips), default=0.0)


def load_audio_clip(path: Union[str, Path]) -> AudioClip:
    """Read an audio file as float32.

    Raises:
        FileNotFoundError: the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing audio file: {path}")
    data, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
    logger.debug("loaded %s: %d frames @ %d Hz", path, data.shape[0], sample_rate)
    return AudioClip(samples=data, sample_rate=int(sample_rate))


def place_clip(clip: AudioClip, placement: AudioClipPlacement) -> PlacedClip:
    """Position a decoded clip; without an explicit duration it runs to the end of the file."""
    if placement.duration_sec is not None:
        duration = placement.duration_sec
    else:
        duration = max(0.0, clip.length_sec - placement.clip_in_sec)
    return PlacedClip(
        clip=clip,
        start_sec=placement.start_sec,
        end_sec=placement.start_sec + duration,
        clip_in_sec=placement.clip_in_sec,
    )


def build_sources(
    setup: DirectorSetup,
    base_dir: Optional[Path] = None,
) -> Dict[str, ActivitySource]:
    """Decode every actor's clips.  Relative paths resolve against *base_dir*.

    Actors without clips get no entry and are never active.
    """
    cache: Dict[Path, AudioClip] = {}
    sources: Dict[str, ActivitySource] = {}
    for actor in setup.actors:
        placed = []
        for placement in actor.clips:
            path = Path(placement.path)
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            if path not in cache:
                cache[path] = load_audio_clip(path)
            placed.append(place_clip(cache[path], placement))
        if placed:
            sources[actor.actor_id] = ActivitySource(clips=tuple(placed))
    return sources


def timeline_duration(setup: DirectorSetup, sources: Dict[str, ActivitySource]) -> float:
    """Configured duration, or the latest clip end when the setup leaves it out."""
    if setup.duration_sec is not None:
        return setup.duration_sec
    return max((s.end_sec for s in sources.values()), default=0.0)
