"""Pydantic schemas for step completion and resource bookmarks."""
from pydantic import Field, field_validator

from hitchpath.schemas.common import CamelSchema
from hitchpath.schemas.path import ResourceKey, canonical_step_id


class StepProgressRequest(CamelSchema):
    step_id: str
    completed: bool
    path_id: str | None = None

    @field_validator("step_id", mode="before")
    @classmethod
    def _canonical_id(cls, value):
        return canonical_step_id(value)

    @property
    def progress_id(self) -> str:
        """Step id as stored: named-path steps are kept as "<pathId>-<stepId>"."""
        if self.path_id and not self.step_id.startswith(f"{self.path_id}-"):
            return f"{self.path_id}-{self.step_id}"
        return self.step_id


class SaveResourceRequest(CamelSchema):
    resource_id: str
    saved: bool

    @field_validator("resource_id", mode="before")
    @classmethod
    def _well_formed(cls, value):
        return str(ResourceKey.parse(value))

    @property
    def key(self) -> ResourceKey:
        return ResourceKey.parse(self.resource_id)


class ProgressResponse(CamelSchema):
    completed_steps: list[str]
    saved_resources: list[str]


class StepProgressResponse(CamelSchema):
    message: str
    completed_steps: list[str]


class SaveResourceResponse(CamelSchema):
    message: str
    saved_resources: list[str]


class SavedResourcesResponse(CamelSchema):
    saved_resources: list[str]


class PathProgressSummary(CamelSchema):
    path_id: str | None = None
    total: int
    completed: int
    percent: float = Field(ge=0, le=100)


class SavedResourceDetail(CamelSchema):
    id: str
    step_id: str
    step_title: str
    path_id: str | None = None
    title: str
    url: str


class SavedResourceDetailsResponse(CamelSchema):
    resources: list[SavedResourceDetail]
