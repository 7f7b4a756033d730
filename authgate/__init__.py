"""
authgate: Google sign-in service.

Verifies a Google credential, resolves it to a local user keyed by email,
and issues the application's own session JWT.
"""

__version__ = "1.0.0"
