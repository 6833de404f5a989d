# src/trackannot/cli.py
from __future__ import annotations
import argparse
from typing import List, Optional

from .annotation import add_segment_size, annotate_table, parse_request_spec
from .errors import AnnotationError, NoCoordinateColumnsError
from .logutil import get_logger, set_verbose
from .table import read_table, write_table
from .track import QueryMode, TrackRegistry

log = get_logger()


def build_registry(tracks_dir: Optional[str], beds: Optional[List[str]]) -> TrackRegistry:
    """Registry from a track directory and/or individual BED files."""
    if tracks_dir:
        registry = TrackRegistry.from_directory(tracks_dir)
    else:
        registry = TrackRegistry()
    for path in beds or []:
        registry.add_bed(path)
    return registry


def annotate_cmd(args) -> int:
    """
    CLI entry point for 'annotate'.
    """
    try:
        registry = build_registry(args.tracks_dir, args.bed)
    except (ValueError, OSError) as e:
        log.error("Could not load tracks: %s", e)
        return 1
    try:
        requests = [parse_request_spec(s) for s in args.track]
    except ValueError as e:
        log.error("%s", e)
        return 1
    mode = QueryMode.CLOSEST if args.closest else QueryMode.OVERLAP

    df = read_table(args.input)
    try:
        out, failures = annotate_table(df, requests, registry, mode=mode)
    except NoCoordinateColumnsError as e:
        log.error("%s Nothing was written.", e)
        return 1
    except (AnnotationError, ValueError) as e:
        log.error("Annotation failed: %s", e)
        return 1

    write_table(out, args.output)
    log.info("Saved: %s  (n=%d, columns=%d)", args.output, len(out), len(out.columns))
    if failures:
        log.warning("Tracks that could not be loaded: %s", ", ".join(sorted(failures)))
    return 0


def segment_size_cmd(args) -> int:
    """
    CLI entry point for 'segment-size'.
    """
    df = read_table(args.input)
    try:
        out = add_segment_size(df)
    except NoCoordinateColumnsError as e:
        log.error("%s Nothing was written.", e)
        return 1
    write_table(out, args.output)
    log.info("Saved: %s  (n=%d)", args.output, len(out))
    return 0


def tracks_cmd(args) -> int:
    """
    CLI entry point for 'tracks': print name, description and source of each track.
    """
    try:
        registry = build_registry(args.tracks_dir, args.bed)
    except (ValueError, OSError) as e:
        log.error("Could not load tracks: %s", e)
        return 1
    for name in registry.names():
        meta = registry.metadata(name)
        print(f"{name}\t{meta.get('description', '')}\t{meta.get('source', '')}")
    return 0


def _add_track_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--tracks-dir", default=None, help="Directory of BED(.gz) track files")
    p.add_argument("--bed", action="append", default=None, help="BED(.gz) track file (repeatable)")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="trackannot",
        description="trackannot: annotate genomic regions with features from reference tracks"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    # annotate
    p = sub.add_parser(
        "annotate",
        help="Append per-track feature columns to a regions table (keeps original columns)."
    )
    p.add_argument("--input", required=True, help="Input TSV with a location/region column or chr/start/end columns")
    p.add_argument("--output", required=True, help="Output TSV path")
    _add_track_source_args(p)
    p.add_argument(
        "--track", action="append", required=True,
        help=(
            "Track and options as NAME[:OPT,...]; OPT in count, all, alpha, condensed, "
            "locations, first[=N], off. Without options the full list is reported. Repeatable."
        )
    )
    p.add_argument("--closest", action="store_true", help="Report neighbouring features instead of overlapping ones")
    p.set_defaults(func=annotate_cmd)

    # segment-size
    p = sub.add_parser(
        "segment-size",
        help="Append a segment.size.kb column computed from each row's region."
    )
    p.add_argument("--input", required=True, help="Input TSV with a location/region column or chr/start/end columns")
    p.add_argument("--output", required=True, help="Output TSV path")
    p.set_defaults(func=segment_size_cmd)

    # tracks
    p = sub.add_parser("tracks", help="List available tracks.")
    _add_track_source_args(p)
    p.set_defaults(func=tracks_cmd)

    args = parser.parse_args(argv)
    set_verbose(args.verbose)
    return args.func(args)
