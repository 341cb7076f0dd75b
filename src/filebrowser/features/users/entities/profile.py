"""User profile entity."""

from pydantic import BaseModel, ConfigDict

# Path of the profile file in every user's directory
PROFILE_PATH = ".profile"


class UserProfile(BaseModel):
    """Public profile stored as JSON in the user's profile file."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    email: str = ""
