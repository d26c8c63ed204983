from hitchpath.schemas.path import NamedPath, Resource, ResourceKey, Step, normalize_resource_url
from hitchpath.schemas.progress import PathProgressSummary, SavedResourceDetail
from hitchpath.schemas.user import LearningPreferences, ProfileUpdate, UserProfile

__all__ = [
    "LearningPreferences",
    "NamedPath",
    "PathProgressSummary",
    "ProfileUpdate",
    "Resource",
    "ResourceKey",
    "SavedResourceDetail",
    "Step",
    "UserProfile",
    "normalize_resource_url",
]
