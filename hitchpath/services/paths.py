"""Main path get-or-generate and named (topic) path creation."""
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from hitchpath.core.errors import NotFoundError
from hitchpath.models.user import User
from hitchpath.schemas.path import NamedPath, Step
from hitchpath.schemas.user import LearningPreferences
from hitchpath.services.generation import GenerationGateway
from hitchpath.services.singleflight import SingleFlight, user_locks

logger = logging.getLogger(__name__)

main_path_flights = SingleFlight()


def preferences_of(user: User) -> LearningPreferences:
    return LearningPreferences(
        career_path=user.career_path,
        current_skill_level=user.current_skill_level or "beginner",
        preferred_learning_style=user.preferred_learning_style or "visual",
    )


def load_steps(raw_steps: list | None) -> list[Step]:
    return [Step.model_validate(raw) for raw in raw_steps or []]


def dump_steps(steps: list[Step]) -> list[dict]:
    return [step.model_dump(mode="json") for step in steps]


async def get_main_path(db: AsyncSession, user: User, gateway: GenerationGateway) -> list[Step]:
    """Return the stored main path, generating and saving it on first use.

    Concurrent first requests for one user share a single generation. The
    flight works in its own session, so it still lands when the request that
    started it goes away.
    """
    if user.has_main_path:
        return load_steps(user.main_path)

    user_id = user.id
    bind = db.bind

    async def generate_and_store() -> list[Step]:
        async with AsyncSession(bind=bind, expire_on_commit=False) as flight_db:
            row = await flight_db.get(User, user_id)
            if row is None:
                raise NotFoundError("User not found.")
            if row.has_main_path:
                return load_steps(row.main_path)

            steps = await gateway.generate_from_preferences(preferences_of(row))
            async with user_locks.hold(user_id):
                await flight_db.refresh(row)
                row.main_path = dump_steps(steps)
                await flight_db.commit()
        logger.info("Stored main path for user %s (%d steps)", user_id, len(steps))
        return steps

    steps = await main_path_flights.do(user_id, generate_and_store)
    await db.refresh(user)
    return steps


async def reset_main_path(db: AsyncSession, user: User) -> None:
    """Forget the main path. Progress marks are kept, even if they now dangle."""
    async with user_locks.hold(user.id):
        await db.refresh(user)
        user.main_path = None
        await db.commit()
    logger.info("Reset main path for user %s", user.id)


async def create_named_path(
    db: AsyncSession,
    user: User,
    gateway: GenerationGateway,
    topic: str,
    details: str = "",
) -> NamedPath:
    """Always generate a new topic path and append it to the user's list."""
    steps = await gateway.generate_for_topic(topic, details)
    named = NamedPath(id=uuid.uuid4().hex, topic=topic.strip(), details=details or "", steps=steps)

    async with user_locks.hold(user.id):
        await db.refresh(user)
        user.specific_paths = [*(user.specific_paths or []), named.model_dump(mode="json", by_alias=True)]
        await db.commit()
    logger.info("Stored named path %s (%r) for user %s", named.id, named.topic, user.id)
    return named


def list_named_paths(user: User) -> list[NamedPath]:
    return [NamedPath.model_validate(raw) for raw in user.specific_paths or []]


def get_named_path(user: User, path_id: str) -> NamedPath:
    for named in list_named_paths(user):
        if named.id == path_id:
            return named
    raise NotFoundError("Learning path not found.")
