from __future__ import annotations
import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from ..errors import FatalIOError
from ..log import get_logger
from ..models import Candidate, FileKind, FileStat


def find_stats(path: str) -> FileStat:
    """Resolve `path` to its real location. Raises FatalIOError if it cannot be resolved."""
    try:
        resolved = os.path.realpath(path, strict=True)
        is_dir = os.path.isdir(resolved)
    except OSError as e:
        raise FatalIOError(path, e.strerror or str(e)) from e
    return FileStat(path=path, resolved_path=resolved, is_directory=is_dir)


def classify(filename: str, cert_pattern: re.Pattern, key_pattern: re.Pattern) -> FileKind | None:
    # a name matching both patterns is a key
    if key_pattern.search(filename):
        return FileKind.KEY
    if cert_pattern.search(filename):
        return FileKind.CERT
    return None


class Walker:
    """
    Enumerates certificate and key candidates below one or more roots.

    Directories are scanned level by level: every directory of the current
    level is listed concurrently and the subdirectories they yield form the
    next level, so no task ever waits on the pool it runs in.
    """

    def __init__(
        self,
        cert_pattern: re.Pattern,
        key_pattern: re.Pattern,
        recursive: bool = False,
        logger: logging.Logger | None = None,
        workers: int = 8,
    ):
        self.cert_pattern = cert_pattern
        self.key_pattern = key_pattern
        self.recursive = recursive
        self.log = logger or get_logger()
        self.workers = max(1, workers)

    def stat(self, path: str) -> FileStat:
        st = find_stats(path)
        if st.resolved_path != path:
            self.log.debug(f"Path: '{path}' resolves to: '{st.resolved_path}'")
        return st

    def scan_directory(self, directory: str) -> tuple[list[Candidate], list[str]]:
        """List one directory. Returns its candidates and the subdirectories to descend into."""
        self.log.info(f"Scanning dir: {directory}")
        try:
            names = sorted(os.listdir(directory))
        except OSError as e:
            raise FatalIOError(directory, e.strerror or str(e)) from e

        candidates: list[Candidate] = []
        subdirs: list[str] = []
        for name in names:
            st = self.stat(os.path.join(directory, name))
            if st.is_directory:
                if self.recursive:
                    subdirs.append(st.resolved_path)
                else:
                    self.log.debug(f"Ignoring directory: '{name}'. Set --recursive option to scan recursively.")
                continue
            kind = classify(name, self.cert_pattern, self.key_pattern)
            if kind is None:
                self.log.debug(f"Skipping file: {name}")
                continue
            candidates.append(Candidate(path=st.path, directory=directory, filename=name, kind=kind))
        return candidates, subdirs

    def walk(self, path: str) -> tuple[list[Candidate], FatalIOError | None]:
        return self.walk_many([path])

    def walk_many(self, paths: Iterable[str]) -> tuple[list[Candidate], FatalIOError | None]:
        candidates: list[Candidate] = []
        try:
            frontier: list[str] = []
            for p in paths:
                st = self.stat(p)
                if not st.is_directory:
                    self.log.warning(f"{p} is not a directory!")
                    continue
                frontier.append(st.resolved_path)

            visited: set[str] = set()
            with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="walk") as pool:
                while frontier:
                    level = [d for d in dict.fromkeys(frontier) if d not in visited]
                    visited.update(level)
                    frontier = []
                    for found, subdirs in pool.map(self.scan_directory, level):
                        candidates.extend(found)
                        frontier.extend(subdirs)
        except FatalIOError as e:
            self.log.error(f"Unable to scan {e.path}: {e.reason}")
            return [], e
        return candidates, None
