"""
Authentication module for DentSync.

Provides the auth provider interface, the Supabase provider, and the
binding that turns session changes into state actions.
"""

from dentsync.auth.binding import (
  AuthError,
  AuthListener,
  AuthProvider,
  bind_auth,
)
from dentsync.auth.client import (
  SupabaseAuthProvider,
  SupabaseConfig,
  user_from_supabase,
)

__all__ = [
  "AuthError",
  "AuthListener",
  "AuthProvider",
  "SupabaseAuthProvider",
  "SupabaseConfig",
  "bind_auth",
  "user_from_supabase",
]
