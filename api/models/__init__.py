# Models module
from .job import JobStateEnum, JobStatus, ProcessingJob
from .article import ArticleModel, NewArticle, Subject, SubjectBrief

__all__ = [
    "JobStateEnum",
    "JobStatus",
    "ProcessingJob",
    "ArticleModel",
    "NewArticle",
    "Subject",
    "SubjectBrief",
]
