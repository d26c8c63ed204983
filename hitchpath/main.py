"""HitchPath - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hitchpath.core.config import get_settings
from hitchpath.core.errors import register_exception_handlers
from hitchpath.core.logging_config import configure_logging
from hitchpath.db.base import Base
from hitchpath.db.session import engine
from hitchpath.routers import auth, paths, user

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("hitchpath")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started", settings.app_name)

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Personalised learning paths generated from your goals",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(paths.router)
app.include_router(user.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
