"""
Core application engine for turning the declared entry tree into torrent-add calls.

`traverse` flattens the tree into jobs, `classify` decides the wire shape of
each job, and the `SubmissionPipeline` dispatches them to the daemon under a
bounded concurrency limit.
"""

from .classifier import classify, detect_source_kind
from .submission import SubmissionPipeline
from .traversal import count_sources, traverse

__all__ = [
    "SubmissionPipeline",
    "classify",
    "count_sources",
    "detect_source_kind",
    "traverse",
]
