"""Versioned schema loaders and validators."""

from shot_director.schemas.setup_v1 import dump_setup, load_setup, validate_setup
from shot_director.schemas.shotlist_v1 import dump_shotlist, load_shotlist, validate_shotlist

__all__ = [
    "load_setup",
    "dump_setup",
    "validate_setup",
    "load_shotlist",
    "dump_shotlist",
    "validate_shotlist",
]
