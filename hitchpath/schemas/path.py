"""Pydantic schemas for learning paths: steps, resources, named paths."""
from datetime import datetime, timezone
from typing import NamedTuple
from urllib.parse import quote_plus, urlparse

from pydantic import BaseModel, Field, field_validator

from hitchpath.schemas.common import CamelSchema

SEARCH_FALLBACK_URL = "https://www.google.com/search?q="
EMPTY_URL_FALLBACK = SEARCH_FALLBACK_URL + "learning+resources"


def canonical_step_id(value) -> str:
    """Step ids arrive as numbers or strings; store them as strings."""
    if isinstance(value, bool) or value is None:
        raise ValueError("step id must be a string or a number")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        if value:
            return value
    raise ValueError("step id must not be empty")


def normalize_resource_url(url: str | None) -> str:
    """URL safe to render as a link; falls back to a web search."""
    if not url or not url.strip():
        return EMPTY_URL_FALLBACK
    url = url.strip()
    candidate = url if url.startswith("http") else "https://" + url
    parsed = urlparse(candidate)
    if parsed.scheme in ("http", "https") and parsed.netloc and " " not in candidate:
        return candidate
    return SEARCH_FALLBACK_URL + quote_plus(url)


class Resource(BaseModel):
    title: str
    url: str


class Step(BaseModel):
    id: str
    title: str
    description: str
    milestone: str
    tips: list[str] = []
    resources: list[Resource] = []

    @field_validator("id", mode="before")
    @classmethod
    def _canonical_id(cls, value):
        return canonical_step_id(value)


class NamedPath(CamelSchema):
    id: str
    topic: str
    details: str = ""
    steps: list[Step]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ResourceKey(NamedTuple):
    """Composite key of one resource: the owning step id and its position."""

    step_id: str
    index: int

    @classmethod
    def parse(cls, raw: str) -> "ResourceKey":
        # Split on the last dash: step ids of named paths contain dashes.
        step_id, sep, index = str(raw).strip().rpartition("-")
        if not sep or not step_id or not index.isdigit():
            raise ValueError(f"resource id must look like '<stepId>-<index>', got {raw!r}")
        return cls(step_id=step_id, index=int(index))

    def __str__(self) -> str:
        return f"{self.step_id}-{self.index}"


class GeneratedSteps(BaseModel):
    """Envelope the oracle is asked to return."""

    steps: list[Step] = Field(min_length=1)


# Response bodies


class LearningPathResponse(CamelSchema):
    learning_path: list[Step]


class SpecificPathRequest(BaseModel):
    topic: str = Field(min_length=1, max_length=200)
    details: str = Field(default="", max_length=2000)


class SpecificPathResponse(CamelSchema):
    specific_path: NamedPath


class SpecificPathsResponse(CamelSchema):
    specific_paths: list[NamedPath]


class MessageResponse(BaseModel):
    message: str
