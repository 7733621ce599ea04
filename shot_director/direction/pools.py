"""Camera pool resolution for segments.

Pure lookups over the setup; groups and actors are never modified.
"""
from __future__ import annotations

from itertools import combinations
from typing import Iterable, List, Optional, Sequence, Set

from shot_director.direction.models import Actor, DirectorSetup, Group, Segment, SegmentType


def _dedupe(cameras: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for camera_id in cameras:
        if camera_id and camera_id not in seen:
            seen.add(camera_id)
            ordered.append(camera_id)
    return ordered


def find_matching_group(groups: Sequence[Group], actors: Iterable[str]) -> Optional[Group]:
    """Exact member-set match first, else the smallest superset (first configured wins ties)."""
    active = frozenset(actors)
    for group in groups:
        if group.member_set == active:
            return group
    supersets = [g for g in groups if active <= g.member_set]
    if not supersets:
        return None
    return min(supersets, key=lambda g: len(g.member_set))


def pool_for(segment: Segment, setup: DirectorSetup) -> List[str]:
    """Ordered, de-duplicated camera ids eligible for *segment*.

    Group segments fall back to the stage pool plus every active actor's own
    pool when no group matches or the matching group has no cameras.
    """
    kind = segment.segment_type
    if kind is SegmentType.SILENT:
        return _dedupe(setup.stage_cameras)

    if kind is SegmentType.SOLO:
        actor = setup.actor(segment.actors[0])
        return _dedupe(actor.cameras) if actor is not None else []

    group = find_matching_group(setup.groups, segment.actors)
    if group is not None and _dedupe(group.cameras):
        return _dedupe(group.cameras)

    fallback: List[str] = list(setup.stage_cameras)
    active = set(segment.actors)
    for actor in setup.actors:
        if actor.actor_id in active:
            fallback.extend(actor.cameras)
    return _dedupe(fallback)


def auto_pair_groups(actors: Sequence[Actor], groups: Sequence[Group]) -> List[Group]:
    """Existing groups plus one empty-pool group for every unconfigured actor pair.

    New ids are "A+B"; an id already in use gets a numeric suffix.
    """
    result = list(groups)
    taken = {g.group_id for g in result}
    for first, second in combinations(actors, 2):
        pair = frozenset((first.actor_id, second.actor_id))
        if any(g.member_set == pair for g in result):
            continue
        group_id = _unique_id(f"{first.actor_id}+{second.actor_id}", taken)
        taken.add(group_id)
        result.append(
            Group(
                group_id=group_id,
                members=[first.actor_id, second.actor_id],
            )
        )
    return result


def _unique_id(base: str, taken: Set[str]) -> str:
    """*base*, or *base* with the first free "_2", "_3", ... suffix."""
    if base not in taken:
        return base
    suffix = 2
    while f"{base}_{suffix}" in taken:
        suffix += 1
    return f"{base}_{suffix}"
