# src/trackannot/track/registry.py
from __future__ import annotations
import threading
from collections import Counter
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..errors import TrackLoadError, UnknownTrackError
from ..logutil import get_logger
from .bed import FeatureElement, Track, discover_bed_files, read_bed_elements, read_track_info
from .index import FeatureIndex

log = get_logger()

Loader = Callable[[], Iterable[FeatureElement]]

# loader failures that are reported as TrackLoadError
_LOAD_ERRORS = (OSError, ValueError, UnicodeDecodeError)


class TrackRegistry:
    """
    Session cache of tracks and their feature indexes, keyed by track name.

    Each track is loaded and indexed at most once for the lifetime of the
    registry, also when several threads ask for the same index concurrently.
    A failed load is remembered and re-raised without retrying.
    """

    def __init__(self):
        self._loaders: Dict[str, Loader] = {}
        self._metadata: Dict[str, Dict[str, str]] = {}
        self._tracks: Dict[str, Track] = {}
        self._indexes: Dict[str, FeatureIndex] = {}
        self._errors: Dict[str, TrackLoadError] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self.build_counts: Counter = Counter()

    # ----- registration -----

    def register(self, name: str, loader: Loader, metadata: Optional[Dict[str, str]] = None) -> None:
        with self._lock:
            if name in self._loaders:
                raise ValueError(f"Track '{name}' is already registered.")
            self._loaders[name] = loader
            self._metadata[name] = dict(metadata or {})
            self._locks[name] = threading.Lock()

    def add_track(self, track: Track) -> None:
        """Register an already loaded track."""
        self.register(track.name, lambda: track.elements, track.metadata)

    def add_bed(self, path: str | Path) -> str:
        """Register a BED(+gz) file; its name comes from the track line or the file stem."""
        name, meta = read_track_info(path)
        self.register(name, lambda: read_bed_elements(path), meta)
        return name

    @classmethod
    def from_directory(cls, directory: str | Path) -> TrackRegistry:
        reg = cls()
        for path in discover_bed_files(directory):
            reg.add_bed(path)
        log.info("Found %d track(s) in %s", len(reg), directory)
        return reg

    # ----- lookups -----

    def __contains__(self, name: str) -> bool:
        return name in self._loaders

    def __len__(self) -> int:
        return len(self._loaders)

    def names(self) -> List[str]:
        return list(self._loaders)

    def metadata(self, name: str) -> Dict[str, str]:
        self._check(name)
        return dict(self._metadata[name])

    def _check(self, name: str) -> None:
        if name not in self._loaders:
            raise UnknownTrackError(name)

    # ----- lazy materialization -----

    def get_track(self, name: str) -> Track:
        track = self._tracks.get(name)
        if track is not None:
            return track
        self._check(name)
        with self._locks[name]:
            return self._load_locked(name)

    def get_features(self, name: str) -> Tuple[FeatureElement, ...]:
        return self.get_track(name).elements

    def get_index(self, name: str) -> FeatureIndex:
        index = self._indexes.get(name)
        if index is not None:
            return index
        self._check(name)
        with self._locks[name]:
            index = self._indexes.get(name)
            if index is None:
                track = self._load_locked(name)
                log.info("Indexing %s ...", name)
                index = FeatureIndex(track.elements)
                self.build_counts[name] += 1
                log.info("Index built: %d elements", len(index))
                self._indexes[name] = index
            return index

    def _load_locked(self, name: str) -> Track:
        # caller holds the per-track lock
        track = self._tracks.get(name)
        if track is not None:
            return track
        err = self._errors.get(name)
        if err is not None:
            raise err
        log.info("Loading track %s", name)
        try:
            elements = tuple(self._loaders[name]())
        except _LOAD_ERRORS as e:
            err = TrackLoadError(name, e)
            self._errors[name] = err
            raise err from e
        track = Track(name, elements, self._metadata[name])
        self._tracks[name] = track
        return track
