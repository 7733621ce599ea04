"""Tests for timing_lock_hash computation."""
from __future__ import annotations

from shot_director.direction.models import SegmentType, Shot
from shot_director.direction.timing import compute_timing_lock_hash


def _make_shot(shot_id: str, start: float, end: float, camera_id: str = "stage_left") -> Shot:
    return Shot(
        shot_id=shot_id,
        start_sec=start,
        end_sec=end,
        camera_id=camera_id,
        segment_type=SegmentType.SILENT,
    )


class TestTimingLockHash:
    def test_empty_shotlist_returns_valid_hash(self):
        h = compute_timing_lock_hash([])
        assert len(h) == 64
        assert all(c in "0123456789abcdef" for c in h)

    def test_hash_changes_on_boundary_change(self):
        a = [_make_shot("shot_000", 0.0, 3.0)]
        b = [_make_shot("shot_000", 0.0, 3.001)]
        assert compute_timing_lock_hash(a) != compute_timing_lock_hash(b)

    def test_hash_changes_on_shot_added(self):
        a = [_make_shot("shot_000", 0.0, 3.0)]
        b = [_make_shot("shot_000", 0.0, 3.0), _make_shot("shot_001", 3.0, 5.0)]
        assert compute_timing_lock_hash(a) != compute_timing_lock_hash(b)

    def test_hash_changes_on_shot_id_change(self):
        a = [_make_shot("shot_000", 0.0, 3.0)]
        b = [_make_shot("shot_999", 0.0, 3.0)]
        assert compute_timing_lock_hash(a) != compute_timing_lock_hash(b)

    def test_hash_stable_on_camera_change(self):
        a = [_make_shot("shot_000", 0.0, 3.0, camera_id="lena_closeup")]
        b = [_make_shot("shot_000", 0.0, 3.0, camera_id="stage_wide")]
        assert compute_timing_lock_hash(a) == compute_timing_lock_hash(b)

    def test_sub_millisecond_noise_ignored(self):
        a = [_make_shot("shot_000", 0.0, 1.75)]
        b = [_make_shot("shot_000", 0.0, 1.7500000000000002)]
        assert compute_timing_lock_hash(a) == compute_timing_lock_hash(b)

    def test_hash_deterministic_across_calls(self):
        shots = [_make_shot("shot_000", 0.0, 2.0), _make_shot("shot_001", 2.0, 4.5)]
        assert len({compute_timing_lock_hash(shots) for _ in range(50)}) == 1
