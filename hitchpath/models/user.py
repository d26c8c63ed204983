"""User model: identity, learning preferences and the embedded path documents."""
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text

from hitchpath.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=True)  # null for federated logins
    name = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)

    # Learning preferences
    preferred_learning_style = Column(String(16), nullable=False, default="visual")
    pace_of_learning = Column(String(16), nullable=False, default="moderate")
    current_skill_level = Column(String(16), nullable=False, default="beginner")
    career_path = Column(String(255), nullable=True)
    desired_skill = Column(String(255), nullable=True)
    primary_language = Column(String(64), nullable=True)
    short_term_goals = Column(Text, nullable=True)
    long_term_goals = Column(Text, nullable=True)

    # Embedded documents. Always reassign, never mutate in place: plain JSON
    # columns do not track in-place changes.
    main_path = Column(JSON(none_as_null=True), nullable=True)  # list of step dicts, None = no path
    specific_paths = Column(JSON, nullable=False, default=list)
    completed_step_ids = Column(JSON, nullable=False, default=list)
    saved_resource_ids = Column(JSON, nullable=False, default=list)  # "<stepId>-<index>"

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=True)

    @property
    def has_main_path(self) -> bool:
        return self.main_path is not None
