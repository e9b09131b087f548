"""
Utilities package for FloatChat

This package provides the region lookup and the batch data processing pipeline.
"""

from .regions import get_ocean_region, DEFAULT_REGION

__all__ = [
    'get_ocean_region',
    'DEFAULT_REGION'
]
