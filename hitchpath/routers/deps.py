"""Shared route dependencies: current user from the bearer token, generation gateway."""
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hitchpath.core.config import Settings, get_settings
from hitchpath.core.errors import AuthError, NotFoundError
from hitchpath.core.security import decode_access_token
from hitchpath.db.session import get_db
from hitchpath.models.user import User
from hitchpath.services.generation import GenerationGateway
from hitchpath.services.oracle import Oracle, get_oracle

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Resolve ``Authorization: Bearer <jwt>`` to a stored user."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Access denied", status_code=401)

    claims = decode_access_token(credentials.credentials)
    try:
        user_id = int(claims["sub"])
    except (KeyError, ValueError) as exc:
        raise AuthError("Invalid token") from exc

    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


def get_generation_gateway(
    oracle: Annotated[Oracle, Depends(get_oracle)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> GenerationGateway:
    return GenerationGateway(oracle, json_mode=settings.llm_json_mode)


DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
Gateway = Annotated[GenerationGateway, Depends(get_generation_gateway)]
