"""
The four-stage newspaper processing pipeline.

One run takes a ProcessingJob through text extraction, subject
summarization, then rendering and persistence of each brief in the order
the summarizer returned them. Progress is reported at fixed checkpoints
through a callback; the caller owns the job status.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from api.models.article import ArticleModel, SubjectBrief
from api.models.job import ProcessingJob
from processing.classifier import GeminiSummarizer, SubjectClassifier
from processing.extractor import TextExtractor
from processing.files import LocalFileStorage
from processing.interfaces import FileStorage, StorageBackend, SummarizationCapability
from processing.persister import RecordPersister
from processing.renderer import ArtifactRenderer, RenderedArtifact

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    """Running checkpoints as (progress, message)."""
    EXTRACTING = (10, "Extracting text")
    SUMMARIZING = (40, "Summarizing subjects")
    RENDERING = (70, "Generating briefs")

    @property
    def progress(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


ProgressCallback = Callable[[PipelineStage], None]


@dataclass
class PipelineResult:
    """What one successful run produced."""
    articles: List[ArticleModel] = field(default_factory=list)
    artifacts: List[RenderedArtifact] = field(default_factory=list)


class NewspaperPipeline:
    """Runs one job through extraction, summarization, rendering and persistence."""

    def __init__(
        self,
        extractor: TextExtractor,
        classifier: SubjectClassifier,
        renderer: ArtifactRenderer,
        persister: RecordPersister
    ):
        self.extractor = extractor
        self.classifier = classifier
        self.renderer = renderer
        self.persister = persister

    async def run(self, job: ProcessingJob, report: ProgressCallback) -> PipelineResult:
        """Run every stage in order; any stage error propagates unchanged."""
        result = PipelineResult()

        report(PipelineStage.EXTRACTING)
        text = await self.extractor.extract(job)

        report(PipelineStage.SUMMARIZING)
        summaries = await self.classifier.classify(text, job.date)

        report(PipelineStage.RENDERING)
        for subject, body in summaries.items():
            brief = SubjectBrief(subject=subject, body=body)
            artifact = await self.renderer.render(subject, job.date, body)
            result.artifacts.append(artifact)

            article = await self.persister.persist(job, brief, artifact)
            if article is not None:
                result.articles.append(article)

        return result


def build_pipeline(
    storage: StorageBackend,
    files: Optional[FileStorage] = None,
    summarizer: Optional[SummarizationCapability] = None
) -> NewspaperPipeline:
    """Wire the default stages around a storage backend."""
    files = files or LocalFileStorage()
    return NewspaperPipeline(
        extractor=TextExtractor(files),
        classifier=SubjectClassifier(summarizer or GeminiSummarizer(), storage),
        renderer=ArtifactRenderer(files),
        persister=RecordPersister(storage),
    )
