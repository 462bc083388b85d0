from .api import ApiClient, ApiError, NetworkError
from .mirror import LocalMirror, SyncedCollection, SyncPolicy
from .state import AppState, Preferences

__all__ = [
    'ApiClient', 'ApiError', 'NetworkError', 'LocalMirror', 'SyncedCollection', 'SyncPolicy',
    'AppState', 'Preferences',
]
