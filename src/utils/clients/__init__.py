"""
Centralized client initialization module.

This module provides lazy-loaded shared clients for the application.
"""
from src.utils.dynamo import get_dynamo
from src.services.user_data import UserDataRepository, get_registry

# Initialize shared clients (lazy loading)
_repository = None

def get_repository() -> UserDataRepository:
    """Get or create the user data repository."""
    global _repository
    if _repository is None:
        _repository = UserDataRepository(get_dynamo(), get_registry())
    return _repository

def set_repository(repository) -> None:
    """Replace the shared repository, or clear it with None."""
    global _repository
    _repository = repository
