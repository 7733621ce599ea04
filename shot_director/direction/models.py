"""DirectorSetup and ShotList data models: the data contracts of the shot director.

schema_version "1.0.0" is embedded in both top-level models so every artifact
is self-describing.  extra="ignore" on all models gives forward-compatibility:
unknown fields from future schema versions are silently dropped rather than
rejected.

Configuration errors (negative or non-finite tunables, undersized groups,
unknown group members, duplicate actors) are raised as pydantic
ValidationError when the models are built, never later inside the pipeline.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

ShotCategory = Literal["close", "medium", "wide", "other"]

_DEFAULT_CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "close": ["close", "tight", "head"],
    "medium": ["medium", "mid", "waist"],
    "wide": ["wide", "full", "stage"],
}


# ── Segment models ────────────────────────────────────────────────────────────


class SegmentType(str, Enum):
    SILENT = "silent"
    SOLO = "solo"
    GROUP = "group"


def segment_type_for(actors: Iterable[str]) -> SegmentType:
    """Silent for nobody, Solo for exactly one actor, Group for two or more."""
    count = len(set(actors))
    if count == 0:
        return SegmentType.SILENT
    if count == 1:
        return SegmentType.SOLO
    return SegmentType.GROUP


class Segment(BaseModel):
    """A maximal interval with a constant set of active actors.

    actors is kept sorted and de-duplicated so that equality and JSON output
    depend only on the set, never on sampling order.  The segment type is
    derived from the set and cannot disagree with it.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    start_sec: float
    end_sec: float
    actors: Tuple[str, ...] = ()

    @field_validator("actors", mode="before")
    @classmethod
    def _sorted_actors(cls, value: Any) -> Tuple[str, ...]:
        return tuple(sorted(set(value)))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def segment_type(self) -> SegmentType:
        return segment_type_for(self.actors)

    @property
    def duration_sec(self) -> float:
        return self.end_sec - self.start_sec

    def same_activity(self, other: "Segment") -> bool:
        return self.actors == other.actors


# ── Setup models ──────────────────────────────────────────────────────────────


class Camera(BaseModel):
    """A camera identifier with an optional explicit shot-scale category."""

    model_config = ConfigDict(extra="ignore")

    camera_id: str = Field(min_length=1)
    category: Optional[ShotCategory] = None


class AudioClipPlacement(BaseModel):
    """Where an audio file sits on the timeline.

    duration_sec defaults to the rest of the file after clip_in_sec.
    """

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    path: str
    start_sec: float = Field(default=0.0, ge=0.0)
    clip_in_sec: float = Field(default=0.0, ge=0.0)
    duration_sec: Optional[float] = Field(default=None, gt=0.0)


class Actor(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    actor_id: str = Field(min_length=1)
    threshold: float = Field(default=0.01, ge=0.0)
    cameras: List[str] = []
    clips: List[AudioClipPlacement] = []


class Group(BaseModel):
    model_config = ConfigDict(extra="ignore")

    group_id: str = Field(min_length=1)
    members: List[str]
    cameras: List[str] = []

    @field_validator("members")
    @classmethod
    def _at_least_two_members(cls, value: List[str]) -> List[str]:
        if len(set(value)) < 2:
            raise ValueError("a group needs at least two distinct members")
        return value

    @property
    def member_set(self) -> frozenset:
        return frozenset(self.members)


class DirectorSettings(BaseModel):
    """Tunable parameters for sampling, smoothing and camera selection."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    sampling_resolution_sec: float = Field(default=0.1, gt=0.0)
    min_shot_duration_sec: float = Field(default=1.0, gt=0.0)
    silence_tolerance_sec: float = Field(default=1.0, ge=0.0)
    random_selection: bool = True
    weighted_selection: bool = True
    close_up_weight: float = Field(default=0.4, ge=0.0)
    medium_weight: float = Field(default=0.35, ge=0.0)
    wide_weight: float = Field(default=0.25, ge=0.0)
    avoid_repeats: bool = True
    max_consecutive_shots: int = Field(default=2, ge=1)
    rms_window_frames: int = Field(default=1024, ge=1)
    category_keywords: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in _DEFAULT_CATEGORY_KEYWORDS.items()}
    )
    seed: Optional[int] = None

    @field_validator("category_keywords")
    @classmethod
    def _known_categories(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        unknown = set(value) - {"close", "medium", "wide"}
        if unknown:
            raise ValueError(f"unknown keyword categories: {sorted(unknown)}")
        return value


class DirectorSetup(BaseModel):
    """Everything one scheduling run needs, minus the decoded audio."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    schema_version: str = "1.0.0"
    setup_id: str = Field(min_length=1)
    duration_sec: Optional[float] = None
    actors: List[Actor] = []
    groups: List[Group] = []
    stage_cameras: List[str] = []
    cameras: List[Camera] = []
    settings: DirectorSettings = Field(default_factory=DirectorSettings)

    @model_validator(mode="after")
    def _check_references(self) -> "DirectorSetup":
        ids = [a.actor_id for a in self.actors]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate actor ids: {duplicates}")
        known = set(ids)
        for group in self.groups:
            missing = sorted(set(group.members) - known)
            if missing:
                raise ValueError(f"group {group.group_id!r} names unknown actors: {missing}")
        return self

    def actor(self, actor_id: str) -> Optional[Actor]:
        for actor in self.actors:
            if actor.actor_id == actor_id:
                return actor
        return None


# ── ShotList models ───────────────────────────────────────────────────────────


class Shot(BaseModel):
    """One camera assignment over a sub-interval of a segment."""

    model_config = ConfigDict(extra="ignore")

    shot_id: str
    start_sec: float
    end_sec: float
    camera_id: str
    segment_type: SegmentType

    @property
    def duration_sec(self) -> float:
        return self.end_sec - self.start_sec


class ScheduleGap(BaseModel):
    """A segment span left without shots because no camera was eligible."""

    model_config = ConfigDict(extra="ignore")

    start_sec: float
    end_sec: float
    segment_type: SegmentType
    actors: List[str] = []


class ShotList(BaseModel):
    """Ordered camera shots for one timeline.

    timing_lock_hash covers shot ids and boundaries only, so re-rolling the
    camera choice for the same segmentation keeps the same timing lock.
    """

    model_config = ConfigDict(extra="ignore")

    schema_version: str = "1.0.0"
    shotlist_id: str
    setup_id: str
    duration_sec: float
    segments: List[Segment] = []
    shots: List[Shot]
    gaps: List[ScheduleGap] = []
    timing_lock_hash: str
    created_at: str  # ISO 8601
    metadata: Dict[str, Any] = {}
