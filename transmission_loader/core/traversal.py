"""
Flattens the declared entry tree into an ordered list of jobs.
"""

import posixpath
from typing import List

from transmission_loader.models.config import Entry
from transmission_loader.models.job import Job


def traverse(entry: Entry, base_directory: str) -> List[Job]:
    """
    Produces one job per source declared anywhere under `entry`.

    Sources declared directly on `entry` download into `base_directory`; each
    child group recurses with its name joined onto the directory. Children are
    visited in sorted order so the result is reproducible for a given tree.

    Args:
        entry: The entry to flatten, usually the configured root.
        base_directory: Directory for the entry's own sources.

    Returns:
        The flattened jobs, parents before their children.
    """
    jobs: List[Job] = []
    _collect(entry, base_directory, jobs)
    return jobs


def _collect(entry: Entry, download_dir: str, jobs: List[Job]) -> None:
    jobs.extend(Job(source=source, download_dir=download_dir) for source in entry.torrents)
    for name in sorted(entry.children or {}):
        _collect(entry.children[name], posixpath.join(download_dir, name), jobs)


def count_sources(entry: Entry) -> int:
    """Counts every source string declared in the tree."""
    return len(entry.torrents) + sum(
        count_sources(child) for child in (entry.children or {}).values()
    )
