"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures used throughout the application: the configuration and its
entry tree, flattened jobs, their wire shapes, and submission results.
"""

from .config import Entry, LoaderConfig
from .job import EmbeddedContent, Job, Reference, SessionContext, SourceKind
from .stats import JobOutcome, SubmissionReport

__all__ = [
    "EmbeddedContent",
    "Entry",
    "Job",
    "JobOutcome",
    "LoaderConfig",
    "Reference",
    "SessionContext",
    "SourceKind",
    "SubmissionReport",
]
