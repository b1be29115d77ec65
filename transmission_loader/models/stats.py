"""
Per-job outcomes and the aggregate report for a submission run.
"""

from dataclasses import dataclass, field
from typing import Optional

from .job import Job, SourceKind


@dataclass(frozen=True)
class JobOutcome:
    """Terminal result of submitting one job."""

    job: Job
    success: bool
    kind: Optional[SourceKind] = None
    detail: str = ""


@dataclass
class SubmissionReport:
    """Tracks statistics for a submission session."""

    total: int = 0
    added: int = 0
    failed: int = 0
    embedded: int = 0
    referenced: int = 0
    duration_seconds: float = 0.0
    failures: list[JobOutcome] = field(default_factory=list, repr=False)

    @classmethod
    def from_outcomes(
        cls, outcomes: list[JobOutcome], duration_seconds: float = 0.0
    ) -> "SubmissionReport":
        """Aggregates outcomes once every job has finished."""
        report = cls(total=len(outcomes), duration_seconds=duration_seconds)
        for outcome in outcomes:
            if outcome.success:
                report.added += 1
            else:
                report.failed += 1
                report.failures.append(outcome)

            if outcome.kind is SourceKind.LOCAL_FILE:
                report.embedded += 1
            elif outcome.kind is not None:
                report.referenced += 1
        return report
