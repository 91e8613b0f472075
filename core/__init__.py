# Core module - configuration, error taxonomy
from .config import settings
from .exceptions import DataUnavailable

__all__ = [
    'settings',
    'DataUnavailable',
]
