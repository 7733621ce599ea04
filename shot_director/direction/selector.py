"""Camera selection with category weighting and an anti-repetition cap.

select_camera() is a pure function of (pool, state, settings, rng): the
"last camera / consecutive count" pair is passed in and a new state is
returned with the choice, so one run threads a single SelectorState through
every shot in emission order.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from shot_director.direction.models import DirectorSettings, DirectorSetup

_CATEGORY_ORDER: Tuple[str, ...] = ("close", "medium", "wide")
_WEIGHT_GRANULARITY: int = 10


@dataclass(frozen=True)
class SelectorState:
    last_camera: Optional[str] = None
    consecutive: int = 0


def classify_camera(camera_id: str, keywords: Mapping[str, Sequence[str]]) -> str:
    """Keyword match on the lower-cased id; close beats medium beats wide."""
    name = camera_id.lower()
    for category in _CATEGORY_ORDER:
        if any(word.lower() in name for word in keywords.get(category, ())):
            return category
    return "other"


def resolve_categories(setup: DirectorSetup) -> Dict[str, str]:
    """Category for every camera the setup mentions, fixed once per run.

    An explicit Camera.category wins over the keyword match.
    """
    keywords = setup.settings.category_keywords
    explicit = {c.camera_id: c.category for c in setup.cameras if c.category is not None}
    mentioned: List[str] = [c.camera_id for c in setup.cameras]
    mentioned.extend(setup.stage_cameras)
    for actor in setup.actors:
        mentioned.extend(actor.cameras)
    for group in setup.groups:
        mentioned.extend(group.cameras)
    return {
        camera_id: explicit.get(camera_id) or classify_camera(camera_id, keywords)
        for camera_id in mentioned
    }


def categorize_pool(pool: Sequence[str], categories: Mapping[str, str]) -> Dict[str, List[str]]:
    buckets: Dict[str, List[str]] = {"close": [], "medium": [], "wide": [], "other": []}
    for camera_id in pool:
        buckets[categories.get(camera_id, "other")].append(camera_id)
    return buckets


def category_replication(settings: DirectorSettings) -> Dict[str, int]:
    """Integer copies per category out of a granularity of 10.

    Weights are normalised to sum to 1; round() is half-to-even.
    """
    raw = {
        "close": settings.close_up_weight,
        "medium": settings.medium_weight,
        "wide": settings.wide_weight,
    }
    total = sum(raw.values())
    if total <= 0:
        total = 1.0
    return {k: int(round(v / total * _WEIGHT_GRANULARITY)) for k, v in raw.items()}


def build_weighted_candidates(
    pool: Sequence[str],
    categories: Mapping[str, str],
    settings: DirectorSettings,
) -> List[str]:
    """Multiset to draw from: each category's cameras repeated by its weight, "other" once."""
    buckets = categorize_pool(pool, categories)
    copies = category_replication(settings)
    weighted: List[str] = []
    for category in _CATEGORY_ORDER:
        if buckets[category]:
            for _ in range(copies[category]):
                weighted.extend(buckets[category])
    weighted.extend(buckets["other"])
    return weighted


def _draw(
    pool: Sequence[str],
    state: SelectorState,
    settings: DirectorSettings,
    categories: Mapping[str, str],
    rng: random.Random,
) -> str:
    if not settings.random_selection:
        if state.last_camera in pool:
            index = (list(pool).index(state.last_camera) + 1) % len(pool)
        else:
            index = 0
        return pool[index]
    if settings.weighted_selection:
        weighted = build_weighted_candidates(pool, categories, settings)
        if weighted:
            return rng.choice(weighted)
    return rng.choice(list(pool))


def select_camera(
    pool: Sequence[str],
    state: SelectorState,
    settings: DirectorSettings,
    categories: Mapping[str, str],
    rng: random.Random,
) -> Tuple[str, SelectorState]:
    """Pick one camera from *pool* and return it with the next state.

    A single-camera pool is returned as-is; the repetition counter is left
    untouched.  When the same camera would reach max_consecutive_shots in a
    row, another camera is drawn uniformly from the rest of the pool.

    Raises:
        ValueError: *pool* is empty.
    """
    if not pool:
        raise ValueError("cannot select a camera from an empty pool")
    if len(pool) == 1:
        return pool[0], SelectorState(last_camera=pool[0], consecutive=state.consecutive)

    selected = _draw(pool, state, settings, categories, rng)
    consecutive = state.consecutive

    if selected == state.last_camera:
        consecutive += 1
        if settings.avoid_repeats and consecutive >= settings.max_consecutive_shots:
            alternatives = [c for c in pool if c != state.last_camera]
            if alternatives:
                selected = rng.choice(alternatives)
                consecutive = 0
    else:
        consecutive = 0

    return selected, SelectorState(last_camera=selected, consecutive=consecutive)
