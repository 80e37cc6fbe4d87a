"""Shared utility functions."""
import math
import re
import uuid
from datetime import date, datetime, timezone


def generate_run_id(newspaper_id: str, enqueued_ms: int) -> str:
    """Generate a job run ID from the newspaper ID and enqueue time in millis."""
    return f"{newspaper_id}-{enqueued_ms}"


def to_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def generate_article_id() -> str:
    """Generate a unique article ID."""
    return f"art_{uuid.uuid4().hex[:12]}"


def generate_subject_id() -> str:
    """Generate a unique subject ID."""
    return f"sub_{uuid.uuid4().hex[:12]}"


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def slugify(value: str) -> str:
    """Lowercase a name and collapse anything non-alphanumeric into dashes."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower())
    return slug.strip("-")


def estimate_read_time(text: str, words_per_minute: int = 200) -> int:
    """Estimate reading time in whole minutes (at least one)."""
    words = len(text.split())
    return max(1, math.ceil(words / words_per_minute))


def validate_iso_date(value: str) -> str:
    """Return the value if it is a YYYY-MM-DD calendar date, else raise ValueError."""
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("date must be in YYYY-MM-DD format")
    return value
