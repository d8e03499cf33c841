"""
envcontext - dotenv Context Loader
==================================

Loads ``KEY=VALUE`` configuration files and resolves ``${NAME}`` references
between entries, falling back to the process environment and process-level
properties, into a single read-only property set.

Modules:
- resolution: placeholder scanner, resolution engine and resolved store
- config: raw table loader, fallback scopes and loader settings
- loader: load session orchestration
- utils: logging
"""

__version__ = "1.0.0"
__author__ = "envcontext contributors"

from .exceptions import (
    EnvContextError,
    ResolutionError,
    InvalidName,
    UnresolvedReference,
    MalformedPlaceholder,
    CircularReference,
    EnvContextLoaderError,
    SourceNotFoundError,
)
from .resolution import ResolutionEngine, ResolvedStore, scan
from .config import LoaderSettings, RawEntry, SystemProperties, system_properties
from .loader import EnvContextLoader, LoadReport, export_to_environ, load_env

__all__ = [
    "EnvContextError",
    "ResolutionError",
    "InvalidName",
    "UnresolvedReference",
    "MalformedPlaceholder",
    "CircularReference",
    "EnvContextLoaderError",
    "SourceNotFoundError",
    "ResolutionEngine",
    "ResolvedStore",
    "scan",
    "LoaderSettings",
    "RawEntry",
    "SystemProperties",
    "system_properties",
    "EnvContextLoader",
    "LoadReport",
    "export_to_environ",
    "load_env",
]
