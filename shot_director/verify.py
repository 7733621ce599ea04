"""shot-director verify: self-verification on built-in fixtures.

Each fixture is a synthetic cast whose activity is a sine tone switched on
over known intervals.  The fixtures are directed twice with the same seed and
every artifact is checked for tiling, type consistency, the repetition cap,
contract conformance and byte-identical output across runs.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Sequence, Tuple

import jsonschema
import numpy as np

from shot_director.direction.audio import ActivitySource, AudioClip, PlacedClip
from shot_director.direction.director import direct_timeline
from shot_director.direction.models import (
    Actor, DirectorSettings, DirectorSetup, Group, Segment, SegmentType, ShotList, segment_type_for,
)
from shot_director.schemas.shotlist_v1 import canonical_json_bytes

logger = logging.getLogger(__name__)

_SAMPLE_RATE = 8000
_FIXTURE_SEED = 7
_TOLERANCE = 1e-6


# ── Fixture factories ─────────────────────────────────────────────────────────

def tone_source(duration: float, active: Sequence[Tuple[float, float]],
                sample_rate: int = _SAMPLE_RATE, amplitude: float = 0.5) -> ActivitySource:
    """A single clip over [0, duration] that is silent except on *active* spans."""
    frames = int(round(duration * sample_rate))
    t = np.arange(frames) / sample_rate
    samples = np.zeros(frames, dtype=np.float32)
    for start, end in active:
        mask = (t >= start) & (t < end)
        samples[mask] = amplitude * np.sin(2 * np.pi * 220.0 * t[mask])
    clip = AudioClip.from_array(samples, sample_rate)
    return ActivitySource(clips=(PlacedClip(clip=clip, start_sec=0.0, end_sec=duration),))


def _fixture_duet() -> Tuple[DirectorSetup, Dict[str, ActivitySource]]:
    setup = DirectorSetup(
        setup_id="fixture_duet", duration_sec=20.0,
        actors=[
            Actor(actor_id="lena", cameras=["lena_closeup", "lena_medium", "lena_wide"]),
            Actor(actor_id="mark", cameras=["mark_closeup", "mark_medium"]),
        ],
        groups=[Group(group_id="duet", members=["lena", "mark"], cameras=["duet_wide", "duet_mid"])],
        stage_cameras=["stage_left", "stage_right", "stage_overhead"],
        settings=DirectorSettings(sampling_resolution_sec=0.1, seed=_FIXTURE_SEED),
    )
    sources = {
        "lena": tone_source(20.0, [(2.0, 9.0), (12.0, 18.0)]),
        "mark": tone_source(20.0, [(6.0, 14.0), (14.3, 16.0)]),
    }
    return setup, sources


def _fixture_sequential() -> Tuple[DirectorSetup, Dict[str, ActivitySource]]:
    setup = DirectorSetup(
        setup_id="fixture_sequential", duration_sec=12.0,
        actors=[Actor(actor_id="solo", cameras=["solo_a", "solo_b"])],
        stage_cameras=["stage_a", "stage_b"],
        settings=DirectorSettings(random_selection=False, max_consecutive_shots=1),
    )
    return setup, {"solo": tone_source(12.0, [(1.0, 11.0)])}


_FIXTURES: List[Tuple[str, Callable[[], Tuple[DirectorSetup, Dict[str, ActivitySource]]]]] = [
    ("duet", _fixture_duet),
    ("sequential", _fixture_sequential),
]


# ── Property checks ───────────────────────────────────────────────────────────

def _segments_tile(segments: Sequence[Segment], duration: float) -> bool:
    if not segments:
        return duration <= 0
    if abs(segments[0].start_sec) > _TOLERANCE or abs(segments[-1].end_sec - duration) > _TOLERANCE:
        return False
    return all(abs(a.end_sec - b.start_sec) <= _TOLERANCE for a, b in zip(segments, segments[1:]))


def _types_consistent(segments: Sequence[Segment]) -> bool:
    return all(s.segment_type is segment_type_for(s.actors) for s in segments)


def _shots_cover_segments(sl: ShotList) -> bool:
    covered = sum(s.duration_sec for s in sl.shots) + sum(g.end_sec - g.start_sec for g in sl.gaps)
    if abs(covered - sl.duration_sec) > _TOLERANCE:
        return False
    return all(a.end_sec <= b.start_sec + _TOLERANCE for a, b in zip(sl.shots, sl.shots[1:]))


def _longest_camera_run(sl: ShotList) -> int:
    longest = run = 0
    previous = None
    for shot in sl.shots:
        run = run + 1 if shot.camera_id == previous else 1
        previous = shot.camera_id
        longest = max(longest, run)
    return longest


def check_shotlist(sl: ShotList, setup: DirectorSetup) -> List[str]:
    """Property violations for one directed fixture (empty list = all good)."""
    problems: List[str] = []
    if not _segments_tile(sl.segments, sl.duration_sec):
        problems.append("segments do not tile the timeline")
    if not _types_consistent(sl.segments):
        problems.append("segment type disagrees with its actor set")
    if not _shots_cover_segments(sl):
        problems.append("shots and gaps do not cover the timeline")
    if setup.settings.avoid_repeats and _longest_camera_run(sl) > setup.settings.max_consecutive_shots:
        problems.append("camera repeated past max_consecutive_shots")
    if any(s.segment_type is SegmentType.SILENT and s.camera_id not in setup.stage_cameras
           for s in sl.shots):
        problems.append("silent shot used a non-stage camera")
    return problems


# ── Runner ────────────────────────────────────────────────────────────────────

def _run_fixtures() -> Dict[str, bytes]:
    results: Dict[str, bytes] = {}
    for name, factory in _FIXTURES:
        setup, sources = factory()
        sl = direct_timeline(setup, sources, rng=random.Random(setup.settings.seed))
        problems = check_shotlist(sl, setup)
        if problems:
            raise AssertionError(f"{name}: {'; '.join(problems)}")
        results[name] = canonical_json_bytes(sl)
    return results


def run_verify() -> bool:
    """Direct every fixture twice; True only if all properties hold and both runs match."""
    try:
        run1 = _run_fixtures()
        run2 = _run_fixtures()
    except (AssertionError, jsonschema.ValidationError) as exc:
        logger.error("verification failed: %s", exc)
        return False
    return run1 == run2
