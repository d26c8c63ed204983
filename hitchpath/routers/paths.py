"""Learning path routes: main path get-or-generate, reset, topic paths."""
from fastapi import APIRouter

from hitchpath.routers.deps import CurrentUser, DbSession, Gateway
from hitchpath.schemas.path import (
    LearningPathResponse,
    MessageResponse,
    SpecificPathRequest,
    SpecificPathResponse,
    SpecificPathsResponse,
)
from hitchpath.services import paths

router = APIRouter(prefix="/api", tags=["paths"])


@router.get("/generate-learning-path", response_model=LearningPathResponse)
async def generate_learning_path(db: DbSession, user: CurrentUser, gateway: Gateway):
    """Return the saved main path, generating it on first request."""
    steps = await paths.get_main_path(db, user, gateway)
    return LearningPathResponse(learning_path=steps)


@router.post("/reset-learning-path", response_model=MessageResponse)
async def reset_learning_path(db: DbSession, user: CurrentUser):
    await paths.reset_main_path(db, user)
    return MessageResponse(message="Learning path reset successfully.")


@router.post("/specific-path/generate", response_model=SpecificPathResponse)
async def generate_specific_path(body: SpecificPathRequest, db: DbSession, user: CurrentUser, gateway: Gateway):
    """Generate a new topic path; repeated topics give independent entries."""
    named = await paths.create_named_path(db, user, gateway, body.topic, body.details)
    return SpecificPathResponse(specific_path=named)


@router.get("/specific-paths", response_model=SpecificPathsResponse)
async def list_specific_paths(user: CurrentUser):
    return SpecificPathsResponse(specific_paths=paths.list_named_paths(user))


@router.get("/specific-paths/{path_id}", response_model=SpecificPathResponse)
async def get_specific_path(path_id: str, user: CurrentUser):
    return SpecificPathResponse(specific_path=paths.get_named_path(user, path_id))
