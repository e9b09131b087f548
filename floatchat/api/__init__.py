"""
HTTP API for FloatChat
"""

from .app import app

__all__ = ['app']
