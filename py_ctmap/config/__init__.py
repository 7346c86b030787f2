"""
Configuration for the cost map service.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
