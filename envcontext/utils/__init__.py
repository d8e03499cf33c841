"""
Utilities Module
================

Contains logging helpers.
"""

from .logger import setup_logging, DiagnosticsLogger

__all__ = [
    'setup_logging',
    'DiagnosticsLogger',
]
