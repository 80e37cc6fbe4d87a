"""Subject classification and summarization via Gemini."""
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from api.models.article import Subject
from processing.interfaces import StorageBackend, SummarizationCapability
from shared.config import settings
from shared.errors import ConfigurationError, ParseError

logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = """You are an analyst creating UPSC subject-wise briefs. Given the raw newspaper text, extract concise bullets per subject only if relevant. Date: {date}.
Subjects:
{subjects}
Return a strict JSON object mapping subject name to a short markdown summary (<= 10 bullets). Only include subjects that are genuinely covered by the text. Example: {{"Economy":"- bullet...","Environment":"- bullet..."}}"""


class GeminiSummarizer:
    """Summarization capability backed by a Gemini chat model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else settings.google_api_key
        self.model = model or settings.gemini_model
        self.temperature = settings.summarizer_temperature if temperature is None else temperature
        self._llm: Optional[ChatGoogleGenerativeAI] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_llm(self) -> ChatGoogleGenerativeAI:
        if self._llm is None:
            self._llm = ChatGoogleGenerativeAI(
                model=self.model,
                temperature=self.temperature,
                google_api_key=self.api_key,
            )
        return self._llm

    async def generate(self, prompt_parts: Sequence[str]) -> str:
        """Send the prompt parts as one multi-part message and return the reply text."""
        if not self.is_configured:
            raise ConfigurationError("GOOGLE_API_KEY not configured")

        message = HumanMessage(content=[{"type": "text", "text": part} for part in prompt_parts])
        response = await self._get_llm().ainvoke([message])
        return _content_text(response.content)


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def extract_json_object(raw: str) -> Dict[str, Any]:
    """
    Parse the span from the first "{" to the last "}" as a JSON object.

    Raises ParseError when there is no such span or it is not an object.
    """
    start = raw.find("{")
    end = raw.rfind("}")
    if start < 0 or end <= start:
        raise ParseError("No JSON object found in summarization response")

    try:
        parsed = json.loads(raw[start:end + 1])
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in summarization response: {e}") from e

    if not isinstance(parsed, dict):
        raise ParseError("Summarization response is not a JSON object")
    return parsed


def _brief_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return "\n".join(str(item) for item in value).strip()
    if value is None:
        return ""
    return str(value).strip()


def parse_subject_map(raw: str) -> Dict[str, str]:
    """Read a subject -> brief mapping; malformed responses yield {}."""
    try:
        parsed = extract_json_object(raw)
    except ParseError as e:
        logger.warning(f"Discarding summarization response: {e}")
        return {}

    briefs = {}
    for subject, value in parsed.items():
        body = _brief_text(value)
        if body:
            briefs[str(subject).strip()] = body
    return briefs


class SubjectClassifier:
    """Asks the summarization capability for per-subject briefs."""

    def __init__(self, summarizer: SummarizationCapability, storage: StorageBackend):
        self.summarizer = summarizer
        self.storage = storage

    def build_prompt(self, date: str, subjects: List[Subject]) -> str:
        subject_list = "\n".join(f"- {s.name}" for s in subjects)
        return PROMPT_TEMPLATE.format(date=date, subjects=subject_list)

    async def classify(self, text: str, date: str) -> Dict[str, str]:
        if not self.summarizer.is_configured:
            raise ConfigurationError("GOOGLE_API_KEY not configured")

        # Not cached, so subjects added at runtime are picked up
        subjects = await self.storage.list_subjects()
        prompt = self.build_prompt(date, subjects)

        raw = await self.summarizer.generate([prompt, text])
        briefs = parse_subject_map(raw)
        logger.info(f"Summarization for {date} returned {len(briefs)} subject briefs")
        return briefs
