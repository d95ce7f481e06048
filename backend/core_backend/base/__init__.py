"""
Core backend base components.

This package provides foundational classes and utilities that should be used
throughout the Django application for consistency and maintainability.
"""

from .serializers import BaseModelSerializer, FieldsetMixin

__all__ = [
    # Serializers
    'BaseModelSerializer',
    'FieldsetMixin',
]
