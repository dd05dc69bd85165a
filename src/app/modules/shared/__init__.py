"""
Shared module - Base model and helpers reused across feature modules.
"""

from app.modules.shared.models import BaseModel

__all__ = ["BaseModel"]
