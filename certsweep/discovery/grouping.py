from __future__ import annotations
import os
from typing import Iterable

from ..models import Candidate, Group, GroupMode


def group_key(directory: str, filename: str, mode: GroupMode) -> str:
    """
    Bundle key for a file. Directory mode keeps one bundle per directory
    (fullchain.pem + privkey.pem); basename mode keeps one per file stem
    (site.crt + site.key).
    """
    if GroupMode(mode) is GroupMode.DIRECTORY:
        return directory
    stem, _ = os.path.splitext(filename)
    return os.path.join(directory, stem)


def build_groups(candidates: Iterable[Candidate], mode: GroupMode) -> list[Group]:
    groups: dict[str, Group] = {}
    for c in candidates:
        key = group_key(c.directory, c.filename, mode)
        if key not in groups:
            groups[key] = Group(key=key)
        groups[key].add_file(c.path)
    return list(groups.values())
