# Utility functions
from .helpers import clamp, format_timestamp

__all__ = ['clamp', 'format_timestamp']
