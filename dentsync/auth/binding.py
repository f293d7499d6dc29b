"""
Session binding between an auth provider and the state store.

The provider reports the signed-in user (or None) whenever the session
changes; each report becomes exactly one SET_USER or LOGOUT action.
"""

import logging
from typing import Any, Callable, Optional, Protocol

from dentsync.models import User
from dentsync.state import Logout, SetUser, Store

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[User]], None]


class AuthError(Exception):
  """
  Authentication failed.

  The message is meant to be shown to the user as-is.
  """

  def __init__(self, message: str):
    super().__init__(message)
    self.message = message


class AuthProvider(Protocol):
  """Interface the core expects from an authentication provider."""

  def subscribe(self, on_change: AuthListener) -> Callable[[], None]:
    """Register for session changes; returns an unsubscribe function."""
    ...

  def sign_in(self, *args: Any, **kwargs: Any) -> User:
    ...

  def sign_out(self) -> None:
    ...


def bind_auth(store: Store, provider: AuthProvider) -> Callable[[], None]:
  """
  Fold auth provider notifications into the store.

  Until the provider reports for the first time the state stays in its
  loading phase. Returns the provider's unsubscribe function.
  """

  def on_change(user: Optional[User]) -> None:
    if user is not None:
      logger.info("Session established for %s", user.label)
      store.dispatch(SetUser(user=user))
    else:
      logger.info("Session ended")
      store.dispatch(Logout())

  return provider.subscribe(on_change)
