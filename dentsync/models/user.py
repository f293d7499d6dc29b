"""
User model for DentSync.

The signed-in user as reported by the authentication provider. The core
treats it as an opaque record; it is never persisted.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
  """
  Authenticated user profile.

  Built from the auth provider's user object on every session change.
  """

  model_config = ConfigDict(frozen=True, from_attributes=True)

  uid: str
  email: Optional[str] = None
  display_name: Optional[str] = None
  photo_url: Optional[str] = None

  @property
  def label(self) -> str:
    """Name to show in the UI, falling back to the email address."""
    return self.display_name or self.email or self.uid
