"""Step completion and resource bookmarks, stored as flat id sets on the user."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from hitchpath.models.user import User
from hitchpath.schemas.path import ResourceKey, Step, normalize_resource_url
from hitchpath.schemas.progress import PathProgressSummary, SavedResourceDetail
from hitchpath.services.paths import list_named_paths, load_steps
from hitchpath.services.singleflight import user_locks

logger = logging.getLogger(__name__)


def toggle_member(ids: list | None, item: str, present: bool) -> list[str]:
    """Set union/difference that keeps insertion order."""
    current = [str(i) for i in ids or []]
    if present:
        if item not in current:
            current.append(item)
        return current
    return [i for i in current if i != item]


async def set_step_completion(db: AsyncSession, user: User, step_id: str, completed: bool) -> list[str]:
    """Mark a step (in)complete. Idempotent; step_id is not checked against any path."""
    async with user_locks.hold(user.id):
        await db.refresh(user)
        user.completed_step_ids = toggle_member(user.completed_step_ids, step_id, completed)
        await db.commit()
    logger.debug("User %s step %s completed=%s", user.id, step_id, completed)
    return list(user.completed_step_ids)


async def set_resource_saved(db: AsyncSession, user: User, key: ResourceKey, saved: bool) -> list[str]:
    """Bookmark or un-bookmark a resource. Idempotent; membership is not checked."""
    async with user_locks.hold(user.id):
        await db.refresh(user)
        user.saved_resource_ids = toggle_member(user.saved_resource_ids, str(key), saved)
        await db.commit()
    logger.debug("User %s resource %s saved=%s", user.id, key, saved)
    return list(user.saved_resource_ids)


def get_progress(user: User) -> dict[str, list[str]]:
    return {
        "completed_step_ids": [str(i) for i in user.completed_step_ids or []],
        "saved_resource_ids": [str(i) for i in user.saved_resource_ids or []],
    }


def path_progress(user: User, steps: list[Step], path_id: str | None = None) -> PathProgressSummary:
    """Share of ``steps`` whose id is in the user's completed set.

    Steps of a named path are tracked as "<pathId>-<stepId>".
    """
    prefix = f"{path_id}-" if path_id else ""
    done = set(get_progress(user)["completed_step_ids"])
    completed = sum(1 for step in steps if prefix + step.id in done)
    percent = round(completed / len(steps) * 100, 1) if steps else 0.0
    return PathProgressSummary(path_id=path_id, total=len(steps), completed=completed, percent=percent)


def _steps_by_progress_id(user: User) -> dict[str, tuple[str | None, Step]]:
    index: dict[str, tuple[str | None, Step]] = {}
    for step in load_steps(user.main_path):
        index.setdefault(step.id, (None, step))
    for named in list_named_paths(user):
        for step in named.steps:
            index.setdefault(f"{named.id}-{step.id}", (named.id, step))
    return index


def resolve_saved_resources(user: User) -> list[SavedResourceDetail]:
    """Expand saved resource ids into displayable resources; stale ids are skipped."""
    index = _steps_by_progress_id(user)
    details = []
    for raw in get_progress(user)["saved_resource_ids"]:
        try:
            key = ResourceKey.parse(raw)
        except ValueError:
            continue
        found = index.get(key.step_id)
        if found is None:
            continue
        path_id, step = found
        if key.index >= len(step.resources):
            continue
        resource = step.resources[key.index]
        details.append(
            SavedResourceDetail(
                id=str(key),
                step_id=step.id,
                step_title=step.title,
                path_id=path_id,
                title=resource.title,
                url=normalize_resource_url(resource.url),
            )
        )
    return details
