from .base import Base
from .models import AuthSession, Letter, Profile

__all__ = [
    "AuthSession",
    "Base",
    "Letter",
    "Profile",
]
