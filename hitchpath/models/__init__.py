from hitchpath.models.user import User

__all__ = ["User"]
