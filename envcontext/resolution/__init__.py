"""
Resolution Module
=================

Placeholder scanning, the resolution engine and the session-wide resolved store.
"""

from .scanner import Placeholder, ScanResult, scan, is_valid_name, is_malformed
from .store import ResolvedStore
from .engine import ResolutionEngine, ResolutionFrame, Diagnostic

__all__ = [
    'Placeholder',
    'ScanResult',
    'scan',
    'is_valid_name',
    'is_malformed',
    'ResolvedStore',
    'ResolutionEngine',
    'ResolutionFrame',
    'Diagnostic',
]
