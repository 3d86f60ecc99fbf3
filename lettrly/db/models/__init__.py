from .auth import AuthSession
from .letters import Letter
from .profiles import Profile

__all__ = [
    "AuthSession",
    "Letter",
    "Profile",
]
