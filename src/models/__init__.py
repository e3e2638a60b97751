"""
Data Models Module
"""

from .track import Track

__all__ = ['Track']
