"""Single-worker FIFO queue for newspaper processing jobs."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from api.models.job import JobStateEnum, JobStatus, ProcessingJob
from processing.pipeline import NewspaperPipeline, PipelineStage
from shared.utils import generate_run_id, get_utc_now, to_millis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedJob:
    """A job waiting for the worker, tagged with its run ID."""
    run_id: str
    job: ProcessingJob


class ProcessingQueue:
    """
    Runs processing jobs one at a time, in enqueue order.

    One worker task pulls from an unbounded asyncio.Queue, so a job never
    starts before the previous one has completed or failed. The status of
    the most recently started job is kept in a single slot that is only
    ever replaced with a new immutable JobStatus, so pollers never observe
    a half-updated status.

    Construct one per process and share it by reference.
    """

    def __init__(self, pipeline: NewspaperPipeline):
        self.pipeline = pipeline
        self._queue: "asyncio.Queue[QueuedJob]" = asyncio.Queue()
        self._latest_status: Optional[JobStatus] = None
        self._active: Optional[QueuedJob] = None
        self._worker_task: Optional[asyncio.Task] = None
        self._stopping = False
        self._last_stamp = 0

    @property
    def latest_status(self) -> Optional[JobStatus]:
        return self._latest_status

    @property
    def pending_count(self) -> int:
        return self._queue.qsize()

    @property
    def is_busy(self) -> bool:
        return self._active is not None

    @property
    def is_running(self) -> bool:
        return self._worker_task is not None and not self._worker_task.done()

    def enqueue(self, job: ProcessingJob) -> JobStatus:
        """
        Admit a job without waiting for it to run.

        Returns a queued status carrying the run ID the job will report
        under once it starts.
        """
        # Strictly increasing so two enqueues in the same millisecond get distinct IDs
        self._last_stamp = max(to_millis(get_utc_now()), self._last_stamp + 1)
        queued = QueuedJob(run_id=generate_run_id(job.newspaper_id, self._last_stamp), job=job)
        self._queue.put_nowait(queued)
        logger.info(f"Queued job {queued.run_id} ({self.pending_count} pending)")
        return JobStatus(id=queued.run_id, state=JobStateEnum.QUEUED)

    def get_latest_status(self) -> Optional[JobStatus]:
        """Status of the most recently started job, or None if none has started."""
        return self._latest_status

    def start(self):
        """Start the worker task on the running event loop."""
        if self.is_running:
            return
        self._worker_task = asyncio.create_task(self._worker_loop())

    async def stop(self):
        """
        Stop the worker.

        A job in flight is allowed to finish. Jobs still pending are dropped
        and marked done so that `join()` returns.
        """
        if self._worker_task is None:
            return
        logger.info("Processing queue stopping...")
        self._stopping = True
        worker = self._worker_task
        if self.is_busy:
            await asyncio.wait({worker})
        if not worker.done():
            worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass
        self._worker_task = None
        self._stopping = False

        dropped = self._drop_pending()
        if dropped:
            logger.warning(f"Dropped {dropped} pending job(s) on shutdown")

    async def join(self):
        """Wait until every job enqueued so far has finished."""
        await self._queue.join()

    def _drop_pending(self) -> int:
        dropped = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
            dropped += 1
        return dropped

    async def _worker_loop(self):
        logger.info("Processing queue worker started")
        while not self._stopping:
            queued = await self._queue.get()
            self._active = queued
            try:
                await self._run(queued)
            finally:
                self._active = None
                self._queue.task_done()

    async def _run(self, queued: QueuedJob):
        job = queued.job
        self._latest_status = JobStatus(
            id=queued.run_id,
            state=JobStateEnum.RUNNING,
            progress=0,
            started_at=get_utc_now()
        )
        logger.info(f"Processing {job.name} ({job.date}) as job {queued.run_id}")

        def report(stage: PipelineStage):
            self._latest_status = self._latest_status.advance(stage.progress, stage.message)

        try:
            result = await self.pipeline.run(job, report)
        except asyncio.CancelledError:
            self._latest_status = self._latest_status.fail(get_utc_now(), "Cancelled on shutdown")
            logger.warning(f"Job {queued.run_id} cancelled")
            raise
        except Exception as e:
            message = str(e) or e.__class__.__name__
            self._latest_status = self._latest_status.fail(get_utc_now(), message)
            logger.exception(f"Job {queued.run_id} failed: {message}")
            return

        self._latest_status = self._latest_status.complete(
            get_utc_now(),
            f"Created {len(result.articles)} articles"
        )
        logger.info(f"Job {queued.run_id} completed with {len(result.articles)} articles")
