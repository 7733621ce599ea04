"""Audio activity → camera ShotList direction package."""

from shot_director.direction.director import analyze_timeline, direct_timeline, summarize_segments
from shot_director.direction.models import (
    Actor,
    AudioClipPlacement,
    Camera,
    DirectorSettings,
    DirectorSetup,
    Group,
    ScheduleGap,
    Segment,
    SegmentType,
    Shot,
    ShotList,
)

__all__ = [
    "analyze_timeline",
    "direct_timeline",
    "summarize_segments",
    "Actor",
    "AudioClipPlacement",
    "Camera",
    "DirectorSettings",
    "DirectorSetup",
    "Group",
    "ScheduleGap",
    "Segment",
    "SegmentType",
    "Shot",
    "ShotList",
]
