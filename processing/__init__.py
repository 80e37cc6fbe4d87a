# Processing module
from .pipeline import NewspaperPipeline, PipelineStage, build_pipeline
from .queue import ProcessingQueue

__all__ = ["NewspaperPipeline", "PipelineStage", "ProcessingQueue", "build_pipeline"]
