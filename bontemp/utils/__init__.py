# bontemp/utils/__init__.py
"""
Utilities shared across the backend.
"""

from .datetime_utils import DateTimeUtils

__all__ = ['DateTimeUtils']
