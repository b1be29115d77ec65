"""
Dispatches one ``torrent-add`` call per job under a bounded concurrency limit.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

from transmission_loader.api.client import TransmissionRPCClient
from transmission_loader.models.config import DEFAULT_CONCURRENCY
from transmission_loader.models.job import Job, SessionContext
from transmission_loader.models.stats import JobOutcome
from transmission_loader.utils.structured_logger import SubmissionLogger

from .classifier import build_source, detect_source_kind

log = logging.getLogger(__name__)


class SubmissionPipeline:
    """
    Submits jobs concurrently, isolating and reporting each job's outcome.
    """

    def __init__(
        self,
        client: TransmissionRPCClient,
        context: SessionContext,
        concurrency: int = DEFAULT_CONCURRENCY,
        events: Optional[SubmissionLogger] = None,
    ):
        """
        Args:
            client: RPC client already carrying the session id from the bootstrap.
            context: Result of the session handshake.
            concurrency: Maximum number of torrent-add calls in flight; 0 means
                the default.
            events: Structured event logger; a console-only one is used if omitted.
        """
        if concurrency < 0:
            raise ValueError("Concurrency must not be negative.")
        self.client = client
        self.context = context
        self.concurrency = concurrency or DEFAULT_CONCURRENCY
        self.semaphore = asyncio.Semaphore(self.concurrency)
        self._events = events or SubmissionLogger()

    async def submit_all(self, jobs: Iterable[Job]) -> List[JobOutcome]:
        """
        Submits every job and waits until each has a terminal outcome.

        Failures are logged and returned, never raised, so one bad torrent
        cannot stop its siblings.
        """
        jobs = list(jobs)
        if not jobs:
            log.info("No torrents declared in the configuration. Nothing to do.")
            return []

        log.debug(
            f"Submitting {len(jobs)} torrents under {self.context.download_dir} "
            f"with concurrency {self.concurrency}..."
        )
        tasks = [self._submit(job) for job in jobs]
        outcomes = await asyncio.gather(*tasks)

        added = sum(1 for outcome in outcomes if outcome.success)
        self._events.submission_finished(len(outcomes), added, len(outcomes) - added)
        return list(outcomes)

    async def _submit(self, job: Job) -> JobOutcome:
        async with self.semaphore:
            kind = None
            try:
                kind, content = await asyncio.to_thread(detect_source_kind, job.source)
                source = build_source(job.source, job.download_dir, kind, content)
                await self.client.add_torrent(source.to_arguments(), self.context)
            except Exception as e:
                detail = str(e) or type(e).__name__
                self._events.torrent_failed(job.source, job.download_dir, detail)
                return JobOutcome(job=job, success=False, kind=kind, detail=detail)

        self._events.torrent_added(job.source, job.download_dir, kind.value)
        return JobOutcome(job=job, success=True, kind=kind)
