"""
Users module - User accounts and roles.
"""

from app.modules.users.models import User, UserRole
from app.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
