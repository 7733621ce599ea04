"""Tests for segment refinement: minimum-duration merge, silence tolerance, coalesce."""
from __future__ import annotations

import pytest

from shot_director.direction.models import Segment, SegmentType
from shot_director.direction.refiner import (
    apply_silence_tolerance,
    check_contiguity,
    coalesce_segments,
    merge_short_segments,
    refine_segments,
)
from shot_director.direction.segments import build_segments


def _seg(start: float, end: float, *actors: str) -> Segment:
    return Segment(start_sec=start, end_sec=end, actors=actors)


def _spans(segments):
    return [(s.start_sec, s.end_sec, s.actors) for s in segments]


# ── Pass A ────────────────────────────────────────────────────────────────────


class TestMergeShortSegments:
    def test_forced_absorption_then_same_activity_extension(self):
        segments = [_seg(0, 1), _seg(1, 2, "A"), _seg(2, 10, "A")]
        assert _spans(merge_short_segments(segments, 3.0)) == [(0, 10, ("A",))]

    def test_very_short_takes_next_activity(self):
        segments = [_seg(0, 0.4, "A"), _seg(0.4, 10, "B")]
        assert _spans(merge_short_segments(segments, 1.0)) == [(0, 10, ("B",))]

    def test_short_but_above_half_stands_alone(self):
        segments = [_seg(0, 0.7, "A"), _seg(0.7, 10, "B")]
        assert merge_short_segments(segments, 1.0) == segments

    def test_long_segments_untouched(self):
        segments = [_seg(0, 4), _seg(4, 8, "A"), _seg(8, 12, "A", "B")]
        assert merge_short_segments(segments, 1.0) == segments

    def test_trailing_short_segment_survives(self):
        segments = [_seg(0, 5, "A"), _seg(5, 5.2, "B")]
        assert merge_short_segments(segments, 1.0) == segments

    def test_single_segment_passthrough(self):
        segments = [_seg(0, 0.1)]
        assert merge_short_segments(segments, 1.0) == segments

    def test_input_not_mutated(self):
        segments = [_seg(0, 0.2, "A"), _seg(0.2, 5, "B")]
        before = list(segments)
        merge_short_segments(segments, 1.0)
        assert segments == before


# ── Pass B ────────────────────────────────────────────────────────────────────


class TestSilenceTolerance:
    def test_prefers_longer_before(self):
        segments = [_seg(0, 5, "A"), _seg(5, 5.4), _seg(5.4, 10, "B")]
        result = apply_silence_tolerance(segments, 1.0)
        assert result[1].actors == ("A",)
        assert (result[1].start_sec, result[1].end_sec) == (5, 5.4)

    def test_prefers_longer_after(self):
        segments = [_seg(0, 1, "A"), _seg(1, 1.5), _seg(1.5, 10, "B")]
        assert apply_silence_tolerance(segments, 1.0)[1].actors == ("B",)

    def test_tie_goes_to_before(self):
        segments = [_seg(0, 2, "A"), _seg(2, 2.5), _seg(2.5, 4.5, "B")]
        assert apply_silence_tolerance(segments, 1.0)[1].actors == ("A",)

    def test_before_wins_when_after_is_silent(self):
        segments = [_seg(0, 1, "A"), _seg(1, 1.5), _seg(1.5, 10)]
        assert apply_silence_tolerance(segments, 1.0)[1].actors == ("A",)

    def test_only_after_available(self):
        segments = [_seg(0, 0.5), _seg(0.5, 10, "A", "B")]
        result = apply_silence_tolerance(segments, 1.0)
        assert result[0].segment_type is SegmentType.GROUP

    def test_both_neighbours_silent_unchanged(self):
        segments = [_seg(0, 3), _seg(3, 3.5), _seg(3.5, 9)]
        assert apply_silence_tolerance(segments, 1.0) == segments

    def test_long_silence_kept(self):
        segments = [_seg(0, 5, "A"), _seg(5, 7), _seg(7, 10, "B")]
        assert apply_silence_tolerance(segments, 1.0) == segments

    def test_boundaries_never_move(self):
        segments = [_seg(0, 5, "A"), _seg(5, 5.4), _seg(5.4, 10, "B")]
        result = apply_silence_tolerance(segments, 1.0)
        assert [(s.start_sec, s.end_sec) for s in result] == [
            (s.start_sec, s.end_sec) for s in segments
        ]


# ── Coalesce ──────────────────────────────────────────────────────────────────


class TestCoalesce:
    def test_merges_equal_neighbours(self):
        segments = [_seg(0, 5, "A"), _seg(5, 5.4, "A"), _seg(5.4, 10, "B")]
        assert _spans(coalesce_segments(segments)) == [(0, 5.4, ("A",)), (5.4, 10, ("B",))]

    def test_idempotent(self):
        segments = [_seg(0, 1, "A"), _seg(1, 2, "A"), _seg(2, 3), _seg(3, 4), _seg(4, 5, "B")]
        once = coalesce_segments(segments)
        assert coalesce_segments(once) == once


# ── Full refinement ───────────────────────────────────────────────────────────


class TestRefineSegments:
    def test_silence_absorbed_into_longer_neighbour(self):
        segments = [_seg(0, 5, "A"), _seg(5, 5.4), _seg(5.4, 10, "B")]
        result = refine_segments(segments, 10.0, min_duration=0.1, silence_tolerance=1.0)
        assert _spans(result) == [(0, 5.4, ("A",)), (5.4, 10, ("B",))]

    def test_near_zero_parameters_are_a_no_op(self):
        def active_at(time):
            if time < 2:
                return frozenset()
            if time < 4.5:
                return frozenset({"A"})
            if time < 7:
                return frozenset({"A", "B"})
            return frozenset({"B"})

        raw = build_segments(active_at, 10.0, 0.5)
        assert refine_segments(raw, 10.0, min_duration=1e-9, silence_tolerance=0.0) == raw

    def test_result_types_match_actor_sets(self):
        segments = [_seg(0, 0.3, "A"), _seg(0.3, 0.5), _seg(0.5, 3, "A", "B"), _seg(3, 3.2), _seg(3.2, 8, "B")]
        for seg in refine_segments(segments, 8.0, min_duration=1.0, silence_tolerance=1.0):
            assert seg.segment_type is {0: SegmentType.SILENT, 1: SegmentType.SOLO}.get(
                len(seg.actors), SegmentType.GROUP
            )

    def test_refined_output_tiles_timeline(self):
        segments = [_seg(0, 0.2), _seg(0.2, 1.1, "A"), _seg(1.1, 1.3), _seg(1.3, 6, "B"), _seg(6, 6.1, "A")]
        result = refine_segments(segments, 6.1, min_duration=1.0, silence_tolerance=1.0)
        check_contiguity(result, 6.1)


# ── Contiguity check ──────────────────────────────────────────────────────────


class TestCheckContiguity:
    def test_valid_sequence_passes(self):
        check_contiguity([_seg(0, 1), _seg(1, 3, "A")], 3.0)

    def test_empty_with_zero_duration_passes(self):
        check_contiguity([], 0.0)

    @pytest.mark.parametrize("segments,duration", [
        ([_seg(0, 1), _seg(1.5, 3, "A")], 3.0),
        ([_seg(0, 2), _seg(1, 3, "A")], 3.0),
        ([_seg(0.5, 3)], 3.0),
        ([_seg(0, 2.5)], 3.0),
        ([], 3.0),
    ])
    def test_violations_raise(self, segments, duration):
        with pytest.raises(AssertionError):
            check_contiguity(segments, duration)
