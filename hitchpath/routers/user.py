"""User routes: profile, step progress and saved resources."""
from typing import Annotated

from fastapi import APIRouter, Query

from hitchpath.routers.deps import CurrentUser, DbSession
from hitchpath.schemas.progress import (
    PathProgressSummary,
    ProgressResponse,
    SavedResourceDetailsResponse,
    SavedResourcesResponse,
    SaveResourceRequest,
    SaveResourceResponse,
    StepProgressRequest,
    StepProgressResponse,
)
from hitchpath.schemas.user import (
    ProfileCompletedResponse,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    UserProfile,
)
from hitchpath.services import accounts, paths, progress

router = APIRouter(prefix="/api", tags=["user"])


# ---------- profile ----------

@router.get("/user/profile", response_model=ProfileResponse)
async def get_profile(user: CurrentUser):
    return ProfileResponse(user=UserProfile.from_user(user))


@router.post("/user/update", response_model=ProfileUpdateResponse)
async def update_profile(body: ProfileUpdate, db: DbSession, user: CurrentUser):
    user = await accounts.update_profile(db, user, body)
    return ProfileUpdateResponse(message="User information updated successfully.", user=UserProfile.from_user(user))


@router.get("/user-info/completed", response_model=ProfileCompletedResponse)
async def profile_completed(user: CurrentUser):
    """Whether the profile has enough to generate a main path."""
    return ProfileCompletedResponse(completed=accounts.profile_complete(user))


# ---------- progress ----------

@router.get("/user/progress", response_model=ProgressResponse)
async def get_progress(user: CurrentUser):
    marks = progress.get_progress(user)
    return ProgressResponse(completed_steps=marks["completed_step_ids"], saved_resources=marks["saved_resource_ids"])


@router.post("/user/progress", response_model=StepProgressResponse)
async def update_progress(body: StepProgressRequest, db: DbSession, user: CurrentUser):
    completed_steps = await progress.set_step_completion(db, user, body.progress_id, body.completed)
    state = "marked as complete" if body.completed else "marked as incomplete"
    return StepProgressResponse(message=f"Step {state}.", completed_steps=completed_steps)


@router.get("/user/progress/summary", response_model=PathProgressSummary)
async def progress_summary(user: CurrentUser, path_id: Annotated[str | None, Query(alias="pathId")] = None):
    """Percent complete of the main path, or of one named path."""
    if path_id:
        steps = paths.get_named_path(user, path_id).steps
    else:
        steps = paths.load_steps(user.main_path)
    return progress.path_progress(user, steps, path_id=path_id)


# ---------- saved resources ----------

@router.post("/user/save-resource", response_model=SaveResourceResponse)
async def save_resource(body: SaveResourceRequest, db: DbSession, user: CurrentUser):
    saved_resources = await progress.set_resource_saved(db, user, body.key, body.saved)
    return SaveResourceResponse(
        message=f"Resource {'saved' if body.saved else 'unsaved'}.",
        saved_resources=saved_resources,
    )


@router.get("/user/saved-resources", response_model=SavedResourcesResponse)
async def saved_resources(user: CurrentUser):
    return SavedResourcesResponse(saved_resources=progress.get_progress(user)["saved_resource_ids"])


@router.get("/user/saved-resources/details", response_model=SavedResourceDetailsResponse)
async def saved_resource_details(user: CurrentUser):
    return SavedResourceDetailsResponse(resources=progress.resolve_saved_resources(user))
