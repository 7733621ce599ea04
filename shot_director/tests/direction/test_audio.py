"""Tests for audio loading and source construction."""
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from shot_director.direction.audio import (
    AudioClip,
    build_sources,
    load_audio_clip,
    place_clip,
    timeline_duration,
)
from shot_director.direction.models import Actor, AudioClipPlacement, DirectorSetup

_RATE = 8000


def _write_wav(path: Path, seconds: float, channels: int = 1, amplitude: float = 0.5) -> Path:
    frames = int(seconds * _RATE)
    data = np.full((frames, channels), amplitude, dtype=np.float32)
    sf.write(str(path), data, _RATE)
    return path


class TestLoadAudioClip:
    def test_reads_frames_and_rate(self, tmp_path: Path):
        clip = load_audio_clip(_write_wav(tmp_path / "a.wav", 1.5))
        assert clip.sample_rate == _RATE
        assert clip.frames == int(1.5 * _RATE)
        assert clip.samples.ndim == 2

    def test_stereo_kept_as_channels(self, tmp_path: Path):
        clip = load_audio_clip(_write_wav(tmp_path / "s.wav", 0.5, channels=2))
        assert clip.samples.shape[1] == 2

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_audio_clip(tmp_path / "nope.wav")


class TestPlaceClip:
    def _clip(self) -> AudioClip:
        return AudioClip.from_array(np.zeros(2 * _RATE), _RATE)

    def test_default_duration_is_rest_of_file(self):
        placed = place_clip(self._clip(), AudioClipPlacement(path="x", start_sec=3.0, clip_in_sec=0.5))
        assert placed.start_sec == 3.0
        assert placed.end_sec == pytest.approx(4.5)

    def test_explicit_duration(self):
        placed = place_clip(self._clip(), AudioClipPlacement(path="x", start_sec=1.0, duration_sec=0.25))
        assert placed.end_sec == pytest.approx(1.25)

    def test_clip_in_past_end_gives_empty_span(self):
        placed = place_clip(self._clip(), AudioClipPlacement(path="x", start_sec=1.0, clip_in_sec=5.0))
        assert placed.end_sec == placed.start_sec


class TestBuildSources:
    def test_relative_paths_resolve_against_base_dir(self, tmp_path: Path):
        _write_wav(tmp_path / "lena.wav", 2.0)
        setup = DirectorSetup(
            setup_id="s",
            actors=[
                Actor(actor_id="lena", clips=[AudioClipPlacement(path="lena.wav", start_sec=1.0)]),
                Actor(actor_id="silent"),
            ],
        )
        sources = build_sources(setup, base_dir=tmp_path)
        assert set(sources) == {"lena"}
        assert sources["lena"].end_sec == pytest.approx(3.0)

    def test_same_file_decoded_once(self, tmp_path: Path):
        _write_wav(tmp_path / "mix.wav", 1.0)
        setup = DirectorSetup(
            setup_id="s",
            actors=[
                Actor(actor_id="a", clips=[AudioClipPlacement(path="mix.wav")]),
                Actor(actor_id="b", clips=[AudioClipPlacement(path="mix.wav", start_sec=2.0)]),
            ],
        )
        sources = build_sources(setup, base_dir=tmp_path)
        assert sources["a"].clips[0].clip is sources["b"].clips[0].clip

    def test_duration_derived_from_latest_clip(self, tmp_path: Path):
        _write_wav(tmp_path / "a.wav", 2.0)
        setup = DirectorSetup(
            setup_id="s",
            actors=[Actor(actor_id="a", clips=[AudioClipPlacement(path="a.wav", start_sec=4.0)])],
        )
        assert timeline_duration(setup, build_sources(setup, base_dir=tmp_path)) == pytest.approx(6.0)

    def test_explicit_duration_wins(self):
        assert timeline_duration(DirectorSetup(setup_id="s", duration_sec=12.0), {}) == 12.0

    def test_no_sources_no_duration(self):
        assert timeline_duration(DirectorSetup(setup_id="s"), {}) == 0.0
