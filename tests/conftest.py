"""Pytest configuration and fixtures."""
import asyncio
import json
from typing import Callable, List, Sequence, Union

import pytest
import pytest_asyncio
from unittest.mock import MagicMock, AsyncMock

from api.models.article import Subject
from api.models.job import ProcessingJob
from database.storage import MemoryStorage
from processing.classifier import SubjectClassifier
from processing.extractor import TextExtractor
from processing.files import LocalFileStorage
from processing.persister import RecordPersister
from processing.pipeline import NewspaperPipeline
from processing.queue import ProcessingQueue
from processing.renderer import ArtifactRenderer


class FakeSummarizer:
    """Summarization capability that replays a canned response."""

    def __init__(
        self,
        response: Union[str, Callable[[Sequence[str]], str]] = "{}",
        configured: bool = True,
        delay: float = 0.0
    ):
        self.response = response
        self.configured = configured
        self.delay = delay
        self.calls: List[List[str]] = []
        self.active = 0
        self.max_active = 0

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def generate(self, prompt_parts: Sequence[str]) -> str:
        self.calls.append(list(prompt_parts))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.active -= 1
        if callable(self.response):
            return self.response(prompt_parts)
        return self.response


def subject_named(storage: MemoryStorage, name: str) -> Subject:
    """Look up a stored subject by its exact name."""
    for subject in storage.subjects.values():
        if subject.name == name:
            return subject
    raise LookupError(f"No subject named {name!r}")


def make_pdf_bytes(title: str, body: str) -> bytes:
    """Build a small text-bearing PDF."""
    data, _ = ArtifactRenderer(LocalFileStorage()).build_pdf(title, body)
    return data


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "output"


@pytest.fixture
def files():
    return LocalFileStorage()


@pytest.fixture
def storage():
    """In-memory storage seeded with the default subjects."""
    return MemoryStorage()


@pytest.fixture
def summarizer():
    return FakeSummarizer(json.dumps({"Economy": "- bullet one"}))


@pytest.fixture
def pipeline(files, storage, summarizer, upload_dir, output_dir):
    """Pipeline over temp directories, memory storage and the fake summarizer."""
    return NewspaperPipeline(
        extractor=TextExtractor(files, upload_dir=str(upload_dir)),
        classifier=SubjectClassifier(summarizer, storage),
        renderer=ArtifactRenderer(files, output_dir=str(output_dir)),
        persister=RecordPersister(storage, unmatched_policy="default", read_time_wpm=200),
    )


@pytest_asyncio.fixture
async def running_queue(pipeline):
    """Processing queue with its worker started."""
    queue = ProcessingQueue(pipeline)
    queue.start()
    yield queue
    await queue.stop()


@pytest.fixture
def write_upload(upload_dir):
    """Write a file into the upload directory and return its name."""
    def _write(name: str, data: Union[str, bytes]) -> str:
        if isinstance(data, str):
            data = data.encode("utf-8")
        (upload_dir / name).write_bytes(data)
        return name
    return _write


@pytest.fixture
def sample_job(write_upload):
    """Plain-text job whose upload already exists."""
    file_name = write_upload("paper.txt", "The budget raised capital spending.")
    return ProcessingJob(
        newspaper_id="np_test001",
        name="The Daily Test",
        date="2024-02-04",
        file_path=f"/srv/uploads/{file_name}",
        mime_type="text/plain",
    )


@pytest.fixture
def mock_mongo_db():
    """Create mock MongoDB database."""
    db = MagicMock()

    # Mock collections
    db.subjects = MagicMock()
    db.articles = MagicMock()

    # Mock common operations
    db.subjects.find_one = AsyncMock()
    db.subjects.insert_one = AsyncMock()
    db.subjects.update_one = AsyncMock()
    db.subjects.count_documents = AsyncMock(return_value=0)
    db.subjects.find = MagicMock()

    db.articles.find_one = AsyncMock()
    db.articles.insert_one = AsyncMock()
    db.articles.count_documents = AsyncMock(return_value=0)
    db.articles.find = MagicMock()

    return db


@pytest.fixture
def sample_subject_doc():
    """Create sample subject document."""
    return {
        "_id": "sub_economy01",
        "name": "Economy",
        "slug": "economy",
        "description": "Economic policies, trade, budget, and financial matters",
        "article_count": 3
    }
