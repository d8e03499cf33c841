"""
Load Session
============

``EnvContextLoader`` runs one load session: it reads each configured source
in order, resolves its entries into a shared ``ResolvedStore`` and freezes
the store into the property set handed to the host.

Example:

    loader = EnvContextLoader(['.env', '.env.local'])
    properties = loader.load()
    db_url = properties['DATABASE_URL']

A later source overrides keys of an earlier one. Keys that cannot be
resolved are dropped with a warning; a circular reference aborts the whole
session and leaves the loader with no properties.
"""

import logging
import os
from dataclasses import dataclass, field
from itertools import groupby
from operator import attrgetter
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, MutableMapping, Optional, Tuple, Union

from .config.raw_table import RawEntry, build_table, read_entries
from .config.scopes import EnvironmentScope, system_properties
from .config.settings import LoaderSettings
from .exceptions import CircularReference, EnvContextError
from .resolution.engine import Diagnostic, ResolutionEngine
from .resolution.store import ResolvedStore
from .utils.logger import DiagnosticsLogger

logger = logging.getLogger(__name__)

PROPERTY_SOURCE_NAME = "envContextDotEnv"


@dataclass
class LoadReport:
    """Outcome of one load session."""
    sources: List[str] = field(default_factory=list)
    entries: int = 0
    committed: int = 0
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def dropped_keys(self) -> List[str]:
        return [d.key for d in self.diagnostics]


class EnvContextLoader:
    """Loads and resolves dotenv-style sources into a frozen property set."""

    name = PROPERTY_SOURCE_NAME

    def __init__(self,
                 sources: Optional[Iterable[Union[str, os.PathLike]]] = None,
                 settings: Optional[LoaderSettings] = None,
                 environment: Optional[Mapping[str, str]] = None,
                 properties: Optional[Mapping[str, str]] = None,
                 store: Optional[ResolvedStore] = None):
        """
        Initialize the loader.

        Args:
            sources: Source files in load order (defaults to ``settings.sources``)
            settings: Loader settings
            environment: Environment scope override
            properties: Process-level properties scope override
            store: Store to accumulate into (a fresh one by default)
        """
        self.settings = settings or LoaderSettings()
        if sources is None:
            sources = self.settings.sources
        self.sources = [str(s) for s in sources]

        if environment is None:
            environment = EnvironmentScope() if self.settings.use_environment else {}
        if properties is None:
            properties = system_properties() if self.settings.use_properties else {}

        self.engine = ResolutionEngine(environment=environment, properties=properties)
        self.store = store if store is not None else ResolvedStore()
        self.report = LoadReport()
        self.diagnostics = DiagnosticsLogger(__name__)
        self._properties: Mapping[str, str] = MappingProxyType({})

    # ------------------------------------------------------------------
    @property
    def properties(self) -> Mapping[str, str]:
        """The frozen property set of the last successful load."""
        return self._properties

    def load(self) -> Mapping[str, str]:
        """
        Read and resolve every configured source.

        Returns:
            Read-only mapping of resolved properties

        Raises:
            CircularReference: a value refers back to itself
            EnvContextLoaderError: a source cannot be read
        """
        encoding = self.settings.encoding
        # One table per configured source, even when a file is empty or listed twice
        tables = ((source, read_entries(source, encoding)) for source in self.sources)
        return self._run(tables)

    def load_entries(self, entries: Iterable[RawEntry]) -> Mapping[str, str]:
        """
        Resolve raw entries supplied by the caller.

        Consecutive entries with the same ``source`` form one table; tables
        are resolved in the order they appear.

        Args:
            entries: Raw entries grouped by source

        Returns:
            Read-only mapping of resolved properties
        """
        tables = ((source, list(group)) for source, group in groupby(entries, key=attrgetter('source')))
        return self._run(tables)

    def _run(self, tables: Iterable[Tuple[str, List[RawEntry]]]) -> Mapping[str, str]:
        self.store.clear()
        self.report = LoadReport()
        self._properties = MappingProxyType({})

        try:
            for source, entries in tables:
                self._load_table(source, entries)
        except EnvContextError as e:
            self.store.clear()
            if not isinstance(e, CircularReference):
                logger.error(f"Load failed: {e}")
            raise

        self._properties = self.store.snapshot()
        self.report.committed = len(self._properties)
        self.diagnostics.log_session_summary(
            self.report.sources, self.report.committed, len(self.report.diagnostics)
        )

        if self.settings.export_to_environ:
            export_to_environ(self._properties, override=self.settings.override_environ)

        return self._properties

    def _load_table(self, source: str, entries: List[RawEntry]):
        table = build_table(entries)
        before = len(self.store)

        try:
            diagnostics = self.engine.resolve_table(table, self.store, source)
        except CircularReference as e:
            self.diagnostics.log_circular_reference(e.key, source)
            raise

        self.report.sources.append(source)
        self.report.entries += len(entries)
        self.report.diagnostics.extend(diagnostics)
        self.diagnostics.log_source_loaded(
            source, len(entries), len(table) - len(diagnostics), level="INFO"
        )
        logger.debug(f"Store grew from {before} to {len(self.store)} keys after {source}")


def export_to_environ(properties: Mapping[str, str],
                      override: bool = False,
                      environ: Optional[MutableMapping[str, str]] = None) -> List[str]:
    """
    Publish resolved properties as environment variables.

    Existing variables win unless ``override`` is set, so the properties act
    as the lowest-precedence source.

    Args:
        properties: Resolved properties
        override: Replace variables that are already set
        environ: Target mapping (defaults to ``os.environ``)

    Returns:
        Keys that were written
    """
    if environ is None:
        environ = os.environ

    exported = []
    for key, value in properties.items():
        if override or key not in environ:
            environ[key] = value
            exported.append(key)

    logger.debug(f"Exported {len(exported)} of {len(properties)} properties to the environment")
    return exported


def load_env(*sources: Union[str, Path], **kwargs) -> Mapping[str, str]:
    """Convenience wrapper: load the given sources and return the properties."""
    return EnvContextLoader(sources, **kwargs).load()


__all__ = [
    "EnvContextLoader",
    "LoadReport",
    "PROPERTY_SOURCE_NAME",
    "export_to_environ",
    "load_env",
]
