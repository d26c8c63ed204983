"""SQLAlchemy declarative base and model imports for Alembic."""
from hitchpath.db.session import Base

# Import all models so Alembic can see them
from hitchpath.models.user import User  # noqa: F401

__all__ = ["Base", "User"]
