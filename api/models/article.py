"""Article and subject model definitions."""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class SubjectBrief(BaseModel):
    """A subject-scoped summary produced by the classifier."""
    subject: str
    body: str


class Subject(BaseModel):
    """Subject model for database representation."""
    id: str = Field(alias="_id")
    name: str
    slug: str
    description: Optional[str] = None
    article_count: int = 0

    class Config:
        populate_by_name = True


class NewArticle(BaseModel):
    """Fields needed to create an article."""
    newspaper_id: str
    subject_id: str
    title: str
    content: str
    summary: str
    date: str
    pdf_path: Optional[str] = None
    page_count: int = 1
    read_time: int = 5


class ArticleModel(NewArticle):
    """Article model for database representation."""
    id: str = Field(alias="_id")
    created_at: datetime

    class Config:
        populate_by_name = True
