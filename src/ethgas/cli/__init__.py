"""
CLI module for ethgas commands.
"""

from .main import main

__all__ = [
    'main',
]
