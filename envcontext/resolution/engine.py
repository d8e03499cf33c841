"""
Resolution Engine
=================

Expands ``${NAME}`` placeholders in raw values.

A reference is looked up in a fixed order:
1. Same-file table: the raw entries of the source being processed
2. Resolved store: values committed by earlier keys and earlier sources
3. Process environment
4. Process-level properties

Resolution runs on an explicit work stack instead of call recursion, so deep
reference chains cannot exhaust the interpreter stack. A name referenced
again while it is still being expanded raises ``CircularReference``, which is
fatal for the load session; every other failure only drops the key being
resolved.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from ..config.scopes import EnvironmentScope, system_properties
from ..utils.logger import DiagnosticsLogger
from ..exceptions import (
    CircularReference,
    InvalidName,
    MalformedPlaceholder,
    ResolutionError,
    UnresolvedReference,
)
from .scanner import Placeholder, is_valid_name, scan
from .store import ResolvedStore

logger = logging.getLogger(__name__)


@dataclass
class ResolutionFrame:
    """Working state for resolving one root key."""
    resolving: Set[str] = field(default_factory=set)
    resolved: Dict[str, str] = field(default_factory=dict)
    pending: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Diagnostic:
    """A key dropped during a load session."""
    key: str
    kind: str
    message: str
    source: Optional[str] = None


class ResolutionEngine:
    """Resolves raw tables against a shared ``ResolvedStore``."""

    def __init__(self,
                 environment: Optional[Mapping[str, str]] = None,
                 properties: Optional[Mapping[str, str]] = None):
        """
        Initialize the engine.

        Args:
            environment: Process environment scope (defaults to ``os.environ``)
            properties: Process-level properties scope (defaults to the
                process-wide ``SystemProperties``). Pass ``{}`` to disable
                either fallback.
        """
        self.environment = environment if environment is not None else EnvironmentScope()
        self.properties = properties if properties is not None else system_properties()
        self.diagnostics = DiagnosticsLogger(__name__)

    # ------------------------------------------------------------------
    def resolve(self, key: str, table: Mapping[str, str], store: ResolvedStore) -> str:
        """
        Resolve a single root key.

        Args:
            key: Root key to resolve
            table: Raw ``key -> value`` table of the current source
            store: Values already resolved in this load session

        Returns:
            Fully substituted value (untrimmed)

        Raises:
            InvalidName: key or a referenced name breaks the name grammar
            UnresolvedReference: a name has no value in any scope
            MalformedPlaceholder: a value holds an empty/unterminated placeholder
            CircularReference: a name refers back to itself
        """
        return self._resolve(key.strip(), _trimmed(table), store)

    def _resolve(self, root: str, table: Mapping[str, str], store: ResolvedStore) -> str:
        if not is_valid_name(root):
            raise InvalidName(root)

        frame = ResolutionFrame()
        frame.pending.append(root)

        while frame.pending:
            name = frame.pending[-1]
            if name in frame.resolved:
                # Pushed more than once before its first expansion finished
                frame.pending.pop()
                continue

            value, scope = self._lookup(name, table, store)
            if value is None:
                raise UnresolvedReference(name, root=root)
            logger.debug(f"Expanding {name} from {scope} scope")

            result = scan(value)
            if result.malformed:
                raise MalformedPlaceholder(name, value, root=root)

            frame.resolving.add(name)
            expanded = self._substitute(value, result.placeholders, frame, store, root)
            if expanded is not None:
                frame.resolved[name] = expanded
                frame.resolving.discard(name)
                frame.pending.pop()

        return frame.resolved[root]

    def resolve_table(self,
                      table: Mapping[str, str],
                      store: ResolvedStore,
                      source: Optional[str] = None) -> List[Diagnostic]:
        """
        Resolve every key of a table in order and commit the results.

        Values are trimmed before they are stored and blank values are never
        committed. Recoverable failures drop the key and are returned as
        diagnostics; ``CircularReference`` propagates.

        Args:
            table: Raw ``key -> value`` table of one source
            store: Session store receiving the resolved values
            source: Source label used in diagnostics

        Returns:
            Diagnostics for the keys that were dropped
        """
        diagnostics: List[Diagnostic] = []

        table = _trimmed(table)

        for key in table:
            try:
                value = self._resolve(key, table, store).strip()
            except ResolutionError as e:
                self.diagnostics.log_key_dropped(e.root, str(e), source)
                diagnostics.append(Diagnostic(key=e.root, kind=e.reason, message=str(e), source=source))
                continue

            if not value:
                self.diagnostics.log_key_dropped(key, "resolved to a blank value", source)
                diagnostics.append(Diagnostic(key=key, kind="blank value",
                                              message=f"{key} resolved to a blank value", source=source))
                continue

            store.put(key, value)

        return diagnostics

    # ------------------------------------------------------------------
    def _lookup(self, name: str, table: Mapping[str, str],
                store: ResolvedStore) -> Tuple[Optional[str], Optional[str]]:
        """Find the defining value of ``name``; blank values count as absent."""
        scopes = (
            ("table", table),
            ("store", store),
            ("environment", self.environment),
            ("properties", self.properties),
        )
        for label, scope in scopes:
            value = scope.get(name)
            if value is not None and value.strip():
                return value, label
        return None, None

    def _substitute(self,
                    value: str,
                    placeholders: Sequence[Placeholder],
                    frame: ResolutionFrame,
                    store: ResolvedStore,
                    root: str) -> Optional[str]:
        """
        Splice known values into ``value``.

        Unknown names are pushed onto the frame's stack. Returns None when at
        least one name still has to be resolved first.
        """
        parts: List[str] = []
        cursor = 0
        complete = True

        for placeholder in placeholders:
            name = placeholder.name
            if not is_valid_name(name):
                raise InvalidName(name, root=root)
            if name in frame.resolving:
                raise CircularReference(name, root=root)

            replacement = frame.resolved.get(name)
            if replacement is None:
                replacement = store.get(name)
            if replacement is None:
                frame.pending.append(name)
                complete = False
                continue

            parts.append(value[cursor:placeholder.start])
            parts.append(replacement)
            cursor = placeholder.end

        if not complete:
            return None

        parts.append(value[cursor:])
        return "".join(parts)


def _trimmed(table: Mapping[str, str]) -> Dict[str, str]:
    """Copy of ``table`` keyed by trimmed names; a later duplicate wins."""
    return {key.strip(): value for key, value in table.items()}


__all__ = ["ResolutionEngine", "ResolutionFrame", "Diagnostic"]
