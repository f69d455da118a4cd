"""
Service-level exceptions.

This module contains exceptions that can be raised by various services
in the application.
"""

class UserDataError(Exception):
    """Raised when user data cannot be read from or written to the store."""
    pass

class ProfileNotFoundError(UserDataError):
    """Raised when an operation needs a cycle profile the user has not created."""
    pass
