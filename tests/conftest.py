import asyncio
import json
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LLM_API_KEY", "")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from hitchpath.db.base import Base  # noqa: E402
from hitchpath.db.session import get_db  # noqa: E402
from hitchpath.main import app  # noqa: E402
from hitchpath.models.user import User  # noqa: E402
from hitchpath.services.generation import GenerationGateway  # noqa: E402
from hitchpath.services.oracle import get_oracle  # noqa: E402

SAMPLE_PATH = {
    "steps": [
        {
            "id": 1,
            "title": "Learn HTML",
            "description": "Structure of web pages",
            "milestone": "Week 1",
            "tips": [],
            "resources": [{"title": "MDN HTML", "url": "developer.mozilla.org"}],
        },
        {
            "id": 2,
            "title": "Learn CSS",
            "description": "Styling and layout",
            "milestone": "Week 2",
            "tips": ["Practice flexbox"],
            "resources": [
                {"title": "MDN CSS", "url": "https://developer.mozilla.org/en-US/docs/Web/CSS"},
                {"title": "CSS Tricks", "url": "css-tricks.com"},
            ],
        },
    ]
}

SAMPLE_REPLY = "Here is your learning path:\n" + json.dumps(SAMPLE_PATH, indent=2) + "\nGood luck!"


class StubOracle:
    """Oracle double: replays canned replies and records every prompt."""

    def __init__(self, replies=None, gate: asyncio.Event | None = None):
        self.replies = list(replies) if replies else [SAMPLE_REPLY]
        self.gate = gate
        self.prompts: list[str] = []
        self.json_modes: list[bool] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str, *, json_mode: bool = False) -> str:
        self.prompts.append(prompt)
        self.json_modes.append(json_mode)
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies[min(self.calls, len(self.replies)) - 1]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def user(db) -> User:
    user = User(
        name="Ada",
        email="ada@example.com",
        hashed_password=None,
        career_path="Web development",
        current_skill_level="beginner",
        preferred_learning_style="visual",
        specific_paths=[],
        completed_step_ids=[],
        saved_resource_ids=[],
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
def oracle() -> StubOracle:
    return StubOracle()


@pytest.fixture
def gateway(oracle) -> GenerationGateway:
    return GenerationGateway(oracle)


@pytest.fixture
async def client(session_factory, oracle):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_oracle] = lambda: oracle
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(client) -> dict[str, str]:
    response = await client.post(
        "/register",
        json={"name": "Grace", "email": "grace@example.com", "password": "correct-horse"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
