"""
Supabase authentication provider for DentSync.

Wraps the Supabase auth client so the rest of the app only ever sees the
AuthProvider interface and our own User model.
"""

import logging
import os
from typing import Any, Callable, Optional

from supabase import Client, create_client

from dentsync.auth.binding import AuthError, AuthListener
from dentsync.models import User

logger = logging.getLogger(__name__)


class SupabaseConfig:
  """Configuration for Supabase connection."""

  def __init__(self):
    self.url = os.environ.get("SUPABASE_URL")
    self.anon_key = os.environ.get("SUPABASE_ANON_KEY")

  @property
  def is_configured(self) -> bool:
    """Check if Supabase is properly configured."""
    return bool(self.url and self.anon_key)

  def validate(self) -> None:
    """Raise error if not properly configured."""
    if not self.url:
      raise ValueError("SUPABASE_URL environment variable not set")
    if not self.anon_key:
      raise ValueError("SUPABASE_ANON_KEY environment variable not set")


def user_from_supabase(raw_user: Any) -> Optional[User]:
  """Map a Supabase auth user onto our User model."""
  if raw_user is None:
    return None
  metadata = getattr(raw_user, "user_metadata", None) or {}
  return User(
    uid=str(raw_user.id),
    email=getattr(raw_user, "email", None),
    display_name=metadata.get("full_name") or metadata.get("name"),
    photo_url=metadata.get("avatar_url") or metadata.get("picture"),
  )


class SupabaseAuthProvider:
  """
  AuthProvider backed by Supabase auth.

  Session changes arrive through Supabase's auth state listener, which
  reports the current session shortly after subscribing.
  """

  def __init__(self, client: Client):
    self._client = client

  @classmethod
  def from_config(cls, config: Optional[SupabaseConfig] = None) -> "SupabaseAuthProvider":
    config = config or SupabaseConfig()
    config.validate()
    return cls(create_client(config.url, config.anon_key))

  @property
  def auth(self):
    """Get the auth module."""
    return self._client.auth

  def subscribe(self, on_change: AuthListener) -> Callable[[], None]:
    """Forward every session change to `on_change` as a User or None."""

    def listener(event, session) -> None:
      logger.debug("Supabase auth event %s", event)
      on_change(user_from_supabase(session.user) if session else None)

    subscription = self.auth.on_auth_state_change(listener)
    return subscription.unsubscribe

  def sign_in(self, email: str, password: str) -> User:
    """Sign in an existing user."""
    try:
      response = self.auth.sign_in_with_password({
        "email": email,
        "password": password,
      })
    except Exception as exc:
      raise AuthError(f"Sign-in failed: {exc}") from exc

    user = user_from_supabase(getattr(response, "user", None))
    if user is None:
      raise AuthError("Sign-in failed: no user returned")
    return user

  def sign_out(self) -> None:
    """Sign out the current user."""
    try:
      self.auth.sign_out()
    except Exception as exc:
      raise AuthError(f"Sign-out failed: {exc}") from exc

  def current_user(self) -> Optional[User]:
    """Get the currently signed-in user, if any."""
    session = self.auth.get_session()
    return user_from_supabase(session.user) if session else None
