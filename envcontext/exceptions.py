"""
Exceptions
==========

Error taxonomy for loading and resolving dotenv-style configuration.

Recoverable resolution errors (``ResolutionError`` subclasses) only cost the
key being resolved; ``CircularReference`` aborts the whole load session.
"""

from typing import Optional


class EnvContextError(Exception):
    """Base class for every error raised by envcontext."""


class ResolutionError(EnvContextError):
    """
    A single key could not be resolved.

    Attributes:
        key: Name that failed (the root key or one of its dependencies)
        root: Root key whose resolution was abandoned
    """

    reason = "unresolved"

    def __init__(self, key: str, message: Optional[str] = None, root: Optional[str] = None):
        self.key = key
        self.root = root if root is not None else key
        super().__init__(message or f"{self.reason}: {key}")


class InvalidName(ResolutionError):
    """Key or referenced name does not match the accepted name grammar."""

    reason = "invalid name"

    def __init__(self, key: str, root: Optional[str] = None):
        super().__init__(
            key,
            f"The variable name '{key}' is invalid; names must match [A-Za-z_][A-Za-z0-9_-]*",
            root,
        )


class UnresolvedReference(ResolutionError):
    """Referenced name has no value in any scope."""

    reason = "unresolved reference"

    def __init__(self, key: str, root: Optional[str] = None):
        super().__init__(key, f"The definition of the variable '{key}' was not found", root)


class MalformedPlaceholder(ResolutionError):
    """Value contains an empty or unterminated ``${...}`` token."""

    reason = "malformed placeholder"

    def __init__(self, key: str, value: str = "", root: Optional[str] = None):
        self.value = value
        super().__init__(key, f"The variable definition {key}={value} contains a malformed placeholder", root)


class CircularReference(EnvContextError):
    """A name was referenced again while it was still being resolved."""

    def __init__(self, key: str, root: Optional[str] = None):
        self.key = key
        self.root = root
        super().__init__(f"Circular dependency detected on variable {key}.")


class EnvContextLoaderError(EnvContextError):
    """Reading sources or settings failed."""


class SourceNotFoundError(EnvContextLoaderError):
    """A configured source file does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Source file not found: {path}")


__all__ = [
    "EnvContextError",
    "ResolutionError",
    "InvalidName",
    "UnresolvedReference",
    "MalformedPlaceholder",
    "CircularReference",
    "EnvContextLoaderError",
    "SourceNotFoundError",
]
