"""shot-director CLI entry point."""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Optional


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="shot-director",
        description="Shot Director, audio-driven camera shot scheduling",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.add_parser("verify", help="Run built-in self-verification")

    validate_parser = sub.add_parser("validate-setup", help="Validate a DirectorSetup JSON file")
    validate_parser.add_argument(
        "--setup", required=True, metavar="setup.json",
        help="Path to a DirectorSetup JSON file",
    )
    analyze_parser = sub.add_parser("analyze", help="Segment the setup's audio and print a summary")
    analyze_parser.add_argument("--setup", required=True, metavar="setup.json")
    preview_parser = sub.add_parser("preview", help="Print the generated shots without writing them")
    preview_parser.add_argument("--setup", required=True, metavar="setup.json")
    preview_parser.add_argument("--seed", type=int, default=None, help="Override settings.seed")

    produce_parser = sub.add_parser(
        "produce-shotlist",
        help="Direct a setup → validated canonical ShotList JSON",
    )
    produce_parser.add_argument("--setup", required=True, metavar="setup.json")
    produce_parser.add_argument(
        "--output", required=True, metavar="shotlist.json",
        help="Destination path for the canonical ShotList JSON",
    )
    produce_parser.add_argument("--seed", type=int, default=None, help="Override settings.seed")

    validate_shotlist_parser = sub.add_parser(
        "validate-shotlist",
        help="Validate an existing ShotList JSON file against the canonical contract",
    )
    validate_shotlist_parser.add_argument(
        "--shotlist", required=True, metavar="shotlist.json",
        help="Path to a ShotList JSON file",
    )
    pair_parser = sub.add_parser("pair-groups", help="Add a group for every unconfigured actor pair")
    pair_parser.add_argument("--setup", required=True, metavar="setup.json")
    pair_parser.add_argument("--output", required=True, metavar="setup.json")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "verify":
        from shot_director.verify import run_verify
        if run_verify():
            print("OK: shot-director verified")
            sys.exit(0)
        print("ERROR: shot-director verification failed")
        sys.exit(1)
    elif args.command == "validate-setup":
        _run_or_exit(lambda: _validate_setup_command(Path(args.setup)))
    elif args.command == "analyze":
        _run_or_exit(lambda: analyze_setup(Path(args.setup)))
    elif args.command == "preview":
        _run_or_exit(lambda: preview_shots(Path(args.setup), seed=args.seed))
    elif args.command == "produce-shotlist":
        _run_or_exit(lambda: produce_shotlist(Path(args.setup), Path(args.output), seed=args.seed))
        print(f"OK: wrote {args.output}")
    elif args.command == "validate-shotlist":
        _run_or_exit(lambda: validate_shotlist_file(Path(args.shotlist)))
        print("OK: ShotList is valid")
    elif args.command == "pair-groups":
        _run_or_exit(lambda: write_pair_groups(Path(args.setup), Path(args.output)))
        print(f"OK: wrote {args.output}")
    else:
        parser.print_help()
        sys.exit(1)


def _run_or_exit(action) -> None:
    """Run *action*; print "ERROR: ..." and exit 1 on any failure."""
    import jsonschema  # noqa: PLC0415
    from pydantic import ValidationError  # noqa: PLC0415

    try:
        action()
    except jsonschema.ValidationError as exc:
        print(f"ERROR: contract violation: {exc.message}")
        sys.exit(1)
    except ValidationError as exc:
        print(f"ERROR: invalid setup: {exc.error_count()} error(s)")
        for error in exc.errors():
            print(f"  {error['loc']}: {error['msg']}")
        sys.exit(1)
    except (ValueError, OSError) as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)


def load_setup_file(setup_path: Path):
    """Read, contract-check and parse a DirectorSetup JSON file.

    Raises ``jsonschema.ValidationError`` before pydantic ever sees data that
    violates ``DirectorSetup.v1.json``.
    """
    return _parse_setup(json.loads(setup_path.read_text(encoding="utf-8")))


def _parse_setup(data):
    from shot_director.contract_validate import validate_setup
    from shot_director.schemas.setup_v1 import load_setup

    validate_setup(data)
    return load_setup(data)


def _validate_setup_command(setup_path: Path) -> None:
    from shot_director.validator import validate_setup_rules

    data = json.loads(setup_path.read_text(encoding="utf-8"))
    _parse_setup(data)
    errors = validate_setup_rules(data)
    if errors:
        for error in errors:
            print(f"ERROR: {error}")
        sys.exit(1)
    print("OK: setup is valid")


def _direct(setup_path: Path, seed: Optional[int]):
    from shot_director.direction.audio import build_sources
    from shot_director.direction.director import direct_timeline

    setup = load_setup_file(setup_path)
    if seed is not None:
        setup = setup.model_copy(update={"settings": setup.settings.model_copy(update={"seed": seed})})
    sources = build_sources(setup, base_dir=setup_path.resolve().parent)
    return direct_timeline(setup, sources, rng=random.Random(setup.settings.seed))


def analyze_setup(setup_path: Path) -> None:
    """Print the refined segment count and the per-type breakdown."""
    from shot_director.direction.audio import build_sources
    from shot_director.direction.director import analyze_timeline, summarize_segments

    setup = load_setup_file(setup_path)
    sources = build_sources(setup, base_dir=setup_path.resolve().parent)
    segments = analyze_timeline(setup, sources)
    counts = summarize_segments(segments)
    print(f"Found {len(segments)} segments")
    print(f"  Solo: {counts['solo']}, Group: {counts['group']}, Silent: {counts['silent']}")
    for segment in segments:
        who = ", ".join(segment.actors) or "-"
        print(f"  [{segment.start_sec:.2f}s - {segment.end_sec:.2f}s] {segment.segment_type.value} ({who})")


def preview_shots(setup_path: Path, seed: Optional[int] = None) -> None:
    sl = _direct(setup_path, seed)
    print(f"=== Camera Shot Preview ({len(sl.shots)} shots) ===")
    for shot in sl.shots:
        print(f"[{shot.start_sec:.2f}s - {shot.end_sec:.2f}s] {shot.camera_id} ({shot.segment_type.value})")
    for gap in sl.gaps:
        print(f"[{gap.start_sec:.2f}s - {gap.end_sec:.2f}s] (no camera) ({gap.segment_type.value})")


def produce_shotlist(setup_path: Path, output_path: Path, seed: Optional[int] = None) -> None:
    """Direct setup → canonical ShotList, validate against contracts, write file.

    Raises ``jsonschema.ValidationError`` if:
    - the input setup does not conform to ``DirectorSetup.v1.json``, or
    - the produced ShotList does not conform to ``ShotList.v1.json``.

    The output file is never written when validation fails.
    """
    from shot_director.contract_validate import validate_shotlist
    from shot_director.schemas.shotlist_v1 import dump_shotlist

    sl = _direct(setup_path, seed)
    text = dump_shotlist(sl)
    validate_shotlist(json.loads(text))
    output_path.write_text(text, encoding="utf-8")


def validate_shotlist_file(shotlist_path: Path) -> None:
    """Load a ShotList JSON file and validate it against the canonical contract.

    Raises ``jsonschema.ValidationError`` if the file does not conform to
    ``ShotList.v1.json``.
    """
    from shot_director.contract_validate import validate_shotlist

    data = json.loads(shotlist_path.read_text(encoding="utf-8"))
    validate_shotlist(data)


def write_pair_groups(setup_path: Path, output_path: Path) -> None:
    from shot_director.direction.pools import auto_pair_groups
    from shot_director.schemas.setup_v1 import dump_setup

    setup = load_setup_file(setup_path)
    groups = auto_pair_groups(setup.actors, setup.groups)
    output_path.write_text(dump_setup(setup.model_copy(update={"groups": groups})), encoding="utf-8")


if __name__ == "__main__":
    main()
