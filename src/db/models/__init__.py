# SQLAlchemy models
from .base import Base
from .xp import XPConfig, XPFilter

__all__ = [
    # Base
    "Base",
    # XP block
    "XPConfig",
    "XPFilter",
]
