"""Error types raised by the processing pipeline."""


class PipelineError(Exception):
    """Base class for pipeline stage failures."""


class ExtractionError(PipelineError):
    """Source document is unreadable, corrupt or of an unsupported type."""


class ConfigurationError(PipelineError):
    """A required setting (e.g. the summarization credential) is missing."""


class ParseError(PipelineError):
    """Summarization response could not be read as a subject mapping.

    Never fatal: the classifier degrades to an empty mapping.
    """


class RenderError(PipelineError):
    """Artifact could not be rendered or written."""


class PersistenceError(PipelineError):
    """Storage rejected an article or subject count write."""
