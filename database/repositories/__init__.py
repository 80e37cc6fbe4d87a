# Repositories module
from .article_repo import ArticleRepository
from .subject_repo import DEFAULT_SUBJECTS, SubjectRepository

__all__ = ["ArticleRepository", "SubjectRepository", "DEFAULT_SUBJECTS"]
