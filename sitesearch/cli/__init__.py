"""
CLI module untuk site search
"""

from .app import app

__all__ = ['app']
