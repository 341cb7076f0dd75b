from .profile import PROFILE_PATH, UserProfile

__all__ = ["PROFILE_PATH", "UserProfile"]
