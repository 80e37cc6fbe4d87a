"""Processing queue and pipeline tests."""
import asyncio
import json
from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock

from api.models.job import JobStateEnum, ProcessingJob
from processing.pipeline import PipelineStage
from processing.queue import ProcessingQueue
from conftest import FakeSummarizer


def text_job(write_upload, newspaper_id: str, text: str, mime_type: str = "text/plain") -> ProcessingJob:
    name = write_upload(f"{newspaper_id}.txt", text)
    return ProcessingJob(
        newspaper_id=newspaper_id,
        name=f"Paper {newspaper_id}",
        date="2024-02-04",
        file_path=name,
        mime_type=mime_type,
    )


class TestNewspaperPipeline:
    """Tests for NewspaperPipeline.run."""

    @pytest.mark.asyncio
    async def test_run_reports_checkpoints_in_order(self, pipeline, sample_job):
        """Test the stages report extracting, summarizing, then rendering."""
        stages = []

        await pipeline.run(sample_job, stages.append)

        assert stages == [PipelineStage.EXTRACTING, PipelineStage.SUMMARIZING, PipelineStage.RENDERING]
        assert [s.progress for s in stages] == [10, 40, 70]

    @pytest.mark.asyncio
    async def test_run_renders_and_persists_each_brief(self, pipeline, storage, summarizer, sample_job, output_dir):
        """Test every brief yields one artifact and one article."""
        summarizer.response = json.dumps({"Economy": "- budget", "Environment": "- heatwave"})

        result = await pipeline.run(sample_job, lambda stage: None)

        assert len(result.articles) == 2
        assert len(result.artifacts) == 2
        assert (output_dir / "summaries" / "2024-02-04" / "economy.pdf").exists()
        assert (output_dir / "summaries" / "2024-02-04" / "environment.pdf").exists()
        assert {a.title for a in storage.articles.values()} == {
            "Economy Summary (2024-02-04)",
            "Environment Summary (2024-02-04)",
        }


class TestProcessingQueue:
    """Tests for ProcessingQueue class."""

    def test_latest_status_is_none_before_any_job(self, pipeline):
        """Test no status is reported until a job starts."""
        queue = ProcessingQueue(pipeline)
        assert queue.get_latest_status() is None
        assert queue.latest_status is None
        assert not queue.is_busy

    def test_enqueue_returns_queued_status(self, pipeline, sample_job):
        """Test enqueue is non-blocking and hands back the run ID."""
        queue = ProcessingQueue(pipeline)

        queued = queue.enqueue(sample_job)

        assert queued.state == JobStateEnum.QUEUED
        assert queued.id.startswith("np_test001-")
        assert queue.pending_count == 1
        # The latest slot only tracks started jobs
        assert queue.get_latest_status() is None

    @pytest.mark.asyncio
    async def test_single_job_completes(self, running_queue, sample_job, storage):
        """Test a finished job reports completed at 100%."""
        queued = running_queue.enqueue(sample_job)
        await running_queue.join()

        status = running_queue.get_latest_status()
        assert status.id == queued.id
        assert status.state == JobStateEnum.COMPLETED
        assert status.progress == 100
        assert status.completed_at >= status.started_at
        assert status.message == "Created 1 articles"
        assert len(storage.articles) == 1
        assert not running_queue.is_busy

    @pytest.mark.asyncio
    async def test_unparseable_response_completes_with_no_articles(
        self, running_queue, summarizer, sample_job, storage
    ):
        """Test a malformed summarization response is not fatal."""
        summarizer.response = "The model is having a bad day, no JSON here"

        running_queue.enqueue(sample_job)
        await running_queue.join()

        status = running_queue.get_latest_status()
        assert status.state == JobStateEnum.COMPLETED
        assert status.progress == 100
        assert storage.articles == {}

    @pytest.mark.asyncio
    async def test_missing_credential_fails_and_queue_moves_on(
        self, running_queue, summarizer, write_upload
    ):
        """Test a missing key fails the job without blocking the next one."""
        summarizer.configured = False
        running_queue.enqueue(text_job(write_upload, "np_a", "first paper"))
        await running_queue.join()

        failed = running_queue.get_latest_status()
        assert failed.state == JobStateEnum.FAILED
        assert "GOOGLE_API_KEY" in failed.message
        assert failed.progress == 40
        assert not running_queue.is_busy

        summarizer.configured = True
        running_queue.enqueue(text_job(write_upload, "np_b", "second paper"))
        await running_queue.join()

        status = running_queue.get_latest_status()
        assert status.id.startswith("np_b-")
        assert status.state == JobStateEnum.COMPLETED

    @pytest.mark.asyncio
    async def test_failure_freezes_progress_at_stage(self, running_queue, write_upload):
        """Test a failed job keeps the progress it had reached."""
        running_queue.enqueue(text_job(write_upload, "np_img", "not an image", mime_type="image/jpeg"))
        await running_queue.join()

        status = running_queue.get_latest_status()
        assert status.state == JobStateEnum.FAILED
        assert status.progress == 10
        assert "Unsupported document type" in status.message
        assert status.completed_at is not None

    @pytest.mark.asyncio
    async def test_jobs_run_in_fifo_order_one_at_a_time(self, pipeline, summarizer, write_upload):
        """Test jobs finish in enqueue order and never overlap."""
        summarizer.delay = 0.01
        queue = ProcessingQueue(pipeline)
        jobs = [text_job(write_upload, f"np_{i}", f"paper number {i}") for i in range(4)]

        queued = [queue.enqueue(job) for job in jobs]
        queue.start()
        try:
            await queue.join()
        finally:
            await queue.stop()

        assert [call[1] for call in summarizer.calls] == [f"paper number {i}" for i in range(4)]
        assert summarizer.max_active == 1
        assert queue.get_latest_status().id == queued[-1].id
        assert queue.pending_count == 0

    @pytest.mark.asyncio
    async def test_status_observed_while_running(self, running_queue, summarizer, sample_job):
        """Test pollers see a running status at the summarizing checkpoint."""
        seen = []

        def respond(prompt_parts):
            seen.append(running_queue.get_latest_status())
            return json.dumps({"Economy": "- bullet one"})

        summarizer.response = respond
        running_queue.enqueue(sample_job)
        await running_queue.join()

        assert seen[0].state == JobStateEnum.RUNNING
        assert seen[0].progress == 40
        assert seen[0].message == "Summarizing subjects"
        assert running_queue.get_latest_status().state == JobStateEnum.COMPLETED

    @pytest.mark.asyncio
    async def test_each_run_gets_fresh_status(self, running_queue, write_upload):
        """Test a new run replaces the previous run's status."""
        running_queue.enqueue(text_job(write_upload, "np_x", "x"))
        await running_queue.join()
        first = running_queue.get_latest_status()

        await asyncio.sleep(0.002)
        running_queue.enqueue(text_job(write_upload, "np_y", "y"))
        await running_queue.join()
        second = running_queue.get_latest_status()

        assert first.id != second.id
        assert first.state == JobStateEnum.COMPLETED
        assert second.started_at >= first.completed_at

    @pytest.mark.asyncio
    async def test_render_failure_fails_job_and_queue_moves_on(
        self, running_queue, files, write_upload, monkeypatch
    ):
        """Test a failed artifact write fails the job at the rendering checkpoint."""
        write_file = files.write_file
        attempts = []

        async def flaky_write(path, data):
            attempts.append(path)
            if len(attempts) == 1:
                raise OSError("disk full")
            await write_file(path, data)

        monkeypatch.setattr(files, "write_file", flaky_write)
        running_queue.enqueue(text_job(write_upload, "np_a", "first paper"))
        await running_queue.join()

        failed = running_queue.get_latest_status()
        assert failed.state == JobStateEnum.FAILED
        assert failed.progress == 70
        assert failed.message == "Failed to render brief for Economy: disk full"
        assert failed.completed_at is not None

        running_queue.enqueue(text_job(write_upload, "np_b", "second paper"))
        await running_queue.join()

        status = running_queue.get_latest_status()
        assert status.id.startswith("np_b-")
        assert status.state == JobStateEnum.COMPLETED
        assert status.progress == 100

    @pytest.mark.asyncio
    async def test_persistence_failure_fails_job_and_queue_moves_on(
        self, running_queue, storage, write_upload, monkeypatch
    ):
        """Test a storage error while saving fails the job at the rendering checkpoint."""
        create_article = storage.create_article
        monkeypatch.setattr(
            storage, "create_article", AsyncMock(side_effect=[RuntimeError("connection reset"), None])
        )
        running_queue.enqueue(text_job(write_upload, "np_a", "first paper"))
        await running_queue.join()

        failed = running_queue.get_latest_status()
        assert failed.state == JobStateEnum.FAILED
        assert failed.progress == 70
        assert failed.message == "Failed to save article for Economy: connection reset"
        assert storage.articles == {}

        monkeypatch.setattr(storage, "create_article", create_article)
        running_queue.enqueue(text_job(write_upload, "np_b", "second paper"))
        await running_queue.join()

        status = running_queue.get_latest_status()
        assert status.id.startswith("np_b-")
        assert status.state == JobStateEnum.COMPLETED
        assert len(storage.articles) == 1

    def test_same_millisecond_enqueues_get_distinct_run_ids(self, pipeline, sample_job, monkeypatch):
        """Test run IDs stay unique when the clock does not move between enqueues."""
        frozen = datetime(2024, 2, 4, 10, 30, tzinfo=timezone.utc)
        monkeypatch.setattr("processing.queue.get_utc_now", lambda: frozen)
        queue = ProcessingQueue(pipeline)

        ids = [queue.enqueue(sample_job).id for _ in range(3)]

        assert len(set(ids)) == 3
        assert all(run_id.startswith("np_test001-") for run_id in ids)

    @pytest.mark.asyncio
    async def test_stop_lets_running_job_finish_and_drops_pending(
        self, pipeline, summarizer, write_upload
    ):
        """Test stopping mid-job still ends in a terminal state and releases join()."""
        summarizer.delay = 0.2
        queue = ProcessingQueue(pipeline)
        first = queue.enqueue(text_job(write_upload, "np_a", "first paper"))
        queue.enqueue(text_job(write_upload, "np_b", "second paper"))
        queue.start()

        while len(summarizer.calls) < 1:
            await asyncio.sleep(0.005)
        await queue.stop()

        status = queue.get_latest_status()
        assert status.id == first.id
        assert status.state == JobStateEnum.COMPLETED
        assert status.completed_at is not None
        assert len(summarizer.calls) == 1
        assert queue.pending_count == 0
        assert not queue.is_running
        await asyncio.wait_for(queue.join(), timeout=1)

    @pytest.mark.asyncio
    async def test_cancelled_worker_marks_job_failed(self, pipeline, summarizer, sample_job):
        """Test a job interrupted by task cancellation does not stay running."""
        summarizer.delay = 1
        queue = ProcessingQueue(pipeline)
        queue.enqueue(sample_job)
        queue.start()
        while len(summarizer.calls) < 1:
            await asyncio.sleep(0.005)

        queue._worker_task.cancel()
        await queue.stop()

        status = queue.get_latest_status()
        assert status.state == JobStateEnum.FAILED
        assert status.message == "Cancelled on shutdown"
        assert status.progress == 40
        assert status.completed_at is not None
