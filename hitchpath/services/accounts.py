"""Registration, login and profile updates."""
import logging
import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hitchpath.core.errors import AuthError, ValidationError
from hitchpath.core.security import hash_password, verify_password
from hitchpath.models.user import User
from hitchpath.schemas.user import ProfileUpdate

logger = logging.getLogger(__name__)

# Simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt hard limit (UTF-8)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def register(db: AsyncSession, name: str, email: str, password: str) -> User:
    """Create an account; all field problems are reported together."""
    email_norm = normalize_email(email)
    name = (name or "").strip()
    password = password or ""

    errors = []
    if not name:
        errors.append({"field": "name", "message": "Name is required."})
    if not EMAIL_RE.match(email_norm):
        errors.append({"field": "email", "message": "Invalid email address."})
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append({"field": "password", "message": "Password must be at least 8 characters long."})
    elif len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append({"field": "password", "message": "Password must be at most 72 bytes long."})
    if errors:
        raise ValidationError(errors[0]["message"], errors=errors)

    if await get_user_by_email(db, email_norm) is not None:
        raise ValidationError("Email already in use.", errors=[{"field": "email", "message": "Email already in use."}])

    user = User(
        name=name,
        email=email_norm,
        hashed_password=hash_password(password),
        is_admin=False,
        specific_paths=[],
        completed_step_ids=[],
        saved_resource_ids=[],
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password or "", user.hashed_password):
        raise AuthError("Invalid email or password.", status_code=400)
    return user


async def update_profile(db: AsyncSession, user: User, changes: ProfileUpdate) -> User:
    """Apply only the profile fields present in the request."""
    for field, value in changes.model_dump(exclude_unset=True).items():
        if value is None and field in ("name", "preferred_learning_style", "pace_of_learning", "current_skill_level"):
            continue  # required columns
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return user


def profile_complete(user: User) -> bool:
    return bool(user.name and user.email and user.career_path and user.current_skill_level)
