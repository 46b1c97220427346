"""Background parse worker.

Parsing runs on a single background thread. The caller talks to a job only
through its message channel: ``ParseProgress`` messages while rows are being
parsed, then exactly one terminal ``JobOutcome``. Results are deep-copied
before they cross the boundary, so the caller never shares objects with the
worker thread.

Submitting a new upload supersedes the previous job: it is resolved at once
with a ``SUPERSEDED`` outcome and anything its thread produces later is
discarded. In-flight parsing itself is not interrupted.
"""

from __future__ import annotations

import queue
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, Optional, Union

import structlog

from ghusage.core.config import AppSettings
from ghusage.models.jobs import JobOutcome, JobStatus, ParseProgress
from ghusage.models.report import UploadResult
from ghusage.services.upload import GENERIC_FAILURE, UploadService

logger = structlog.get_logger()

WorkerMessage = Union[ParseProgress, JobOutcome]

SUPERSEDED_MESSAGE = "Superseded by a newer upload."


class ParseJob:
    """Handle for one submitted upload."""

    def __init__(self, job_id: str, filename: str) -> None:
        self.job_id = job_id
        self.filename = filename
        self._channel: queue.Queue[WorkerMessage] = queue.Queue()
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._outcome: Optional[JobOutcome] = None
        self._status = JobStatus.QUEUED

    @property
    def status(self) -> JobStatus:
        return self._status

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def start(self) -> None:
        with self._lock:
            if not self._done.is_set():
                self._status = JobStatus.RUNNING

    def publish_progress(self, processed: int, total: int) -> None:
        with self._lock:
            if self._done.is_set():
                return
            self._status = JobStatus.RUNNING
            self._channel.put(ParseProgress(job_id=self.job_id, processed=processed, total=total))

    def finish(self, status: JobStatus, result: UploadResult) -> bool:
        """Post the terminal message. Returns False if the job already ended."""
        with self._lock:
            if self._done.is_set():
                return False
            outcome = JobOutcome(job_id=self.job_id, status=status, result=result.model_copy(deep=True))
            self._outcome = outcome
            self._status = status
            self._channel.put(outcome)
            self._done.set()
            return True

    def supersede(self) -> bool:
        return self.finish(JobStatus.SUPERSEDED, UploadResult(success=False, error=SUPERSEDED_MESSAGE))

    def messages(self, timeout: Optional[float] = None) -> Iterator[WorkerMessage]:
        """Drain the channel up to and including the terminal message.

        Raises ``queue.Empty`` if nothing arrives within ``timeout`` seconds.
        """
        while True:
            message = self._channel.get(timeout=timeout)
            yield message
            if isinstance(message, JobOutcome):
                return

    def result(self, timeout: Optional[float] = None) -> JobOutcome:
        if not self._done.wait(timeout):
            raise TimeoutError(f"Parse job {self.job_id} did not finish within {timeout}s")
        assert self._outcome is not None
        return self._outcome


class ParseWorker:
    """Runs uploads off the caller's thread, one at a time."""

    def __init__(
        self,
        service: Optional[UploadService] = None,
        *,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self._service = service or UploadService(settings)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ghusage-parse")
        self._lock = threading.Lock()
        self._current: Optional[ParseJob] = None

    @property
    def current(self) -> Optional[ParseJob]:
        return self._current

    def submit(self, filename: str, data: bytes) -> ParseJob:
        job = ParseJob(job_id=uuid.uuid4().hex, filename=filename)
        with self._lock:
            previous, self._current = self._current, job
        if previous is not None and previous.supersede():
            logger.info("parse_job_superseded", job_id=previous.job_id, by=job.job_id)
        self._executor.submit(self._run, job, bytes(data))
        return job

    def _run(self, job: ParseJob, data: bytes) -> None:
        if job.done:
            return
        log = logger.bind(job_id=job.job_id, filename=job.filename)
        job.start()
        log.info("parse_job_started")
        try:
            result = self._service.process(job.filename, data, on_progress=job.publish_progress)
        except Exception:
            log.exception("parse_job_crashed")
            result = UploadResult(success=False, error=GENERIC_FAILURE)
        status = JobStatus.COMPLETED if result.success else JobStatus.FAILED
        if job.finish(status, result):
            log.info("parse_job_finished", status=status.value)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            current = self._current
        if current is not None and not wait:
            current.supersede()
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> ParseWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
