"""Auth routes: register and login, both answering with a bearer token."""
from fastapi import APIRouter

from hitchpath.core.security import create_access_token
from hitchpath.models.user import User
from hitchpath.routers.deps import DbSession
from hitchpath.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserSummary
from hitchpath.services import accounts

router = APIRouter(tags=["auth"])


def _issue_token(user: User) -> str:
    return create_access_token(
        user.id,
        extra={"name": user.name, "email": user.email, "is_admin": bool(user.is_admin)},
    )


def _summary(user: User) -> UserSummary:
    return UserSummary(id=user.id, name=user.name, email=user.email, is_admin=bool(user.is_admin))


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, db: DbSession):
    """Create an account and log it in."""
    user = await accounts.register(db, body.name, body.email, body.password)
    return AuthResponse(message="User registered successfully.", token=_issue_token(user), user=_summary(user))


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(body: LoginRequest, db: DbSession):
    user = await accounts.authenticate(db, body.email, body.password)
    return AuthResponse(token=_issue_token(user), user=_summary(user))
