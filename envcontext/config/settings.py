"""Loader settings.

Settings are read from a YAML file, by default the path named by the
``ENVCONTEXT_CONFIG`` environment variable:

    sources:
      - config/.env
      - config/.env.local
    encoding: utf-8
    use_environment: true
    use_properties: true
    export_to_environ: false
    override_environ: false
    logging:
      level: INFO
      file: logs/envcontext.log

If the settings file does not exist, defaults are used so that callers can
still pass sources explicitly.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..exceptions import EnvContextLoaderError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'ENVCONTEXT_CONFIG'
DEFAULT_CONFIG_PATH = 'envcontext.yaml'


@dataclass
class LoaderSettings:
    """Settings for one load session."""
    sources: List[str] = field(default_factory=list)
    encoding: str = 'utf-8'
    use_environment: bool = True
    use_properties: bool = True
    export_to_environ: bool = False
    override_environ: bool = False
    logging: Dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------------------
    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "LoaderSettings":
        """Load settings from a YAML file; a missing file yields defaults."""
        path = Path(path).expanduser()
        if not path.exists():
            logger.debug(f"Settings file {path} not found, using defaults")
            return cls()

        try:
            with path.open('r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise EnvContextLoaderError(f"Failed to load settings from {path}: {e}") from e

        if not isinstance(data, dict):
            raise EnvContextLoaderError(f"Settings file {path} must contain a mapping")

        settings = cls.from_dict(data)
        # Relative sources are taken relative to the settings file
        settings.sources = [str(path.parent / s) if not Path(s).is_absolute() else s
                            for s in settings.sources]
        return settings

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoaderSettings":
        sources = data.get('sources') or []
        if isinstance(sources, str):
            sources = [sources]

        return cls(
            sources=[str(s) for s in sources],
            encoding=data.get('encoding', 'utf-8'),
            use_environment=bool(data.get('use_environment', True)),
            use_properties=bool(data.get('use_properties', True)),
            export_to_environ=bool(data.get('export_to_environ', False)),
            override_environ=bool(data.get('override_environ', False)),
            logging=dict(data.get('logging') or {}),
        )

    @classmethod
    def from_env(cls) -> "LoaderSettings":
        """Load settings from the file named by ``ENVCONTEXT_CONFIG``."""
        return cls.from_file(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))

    def validate(self) -> List[str]:
        """Validate settings, return list of errors."""
        errors = []

        for source in self.sources:
            if not source or not source.strip():
                errors.append("sources must not contain blank paths")
                break

        try:
            "".encode(self.encoding)
        except LookupError:
            errors.append(f"Unknown encoding: {self.encoding}")

        if self.override_environ and not self.export_to_environ:
            errors.append("override_environ requires export_to_environ")

        level = self.logging.get('level')
        if level is not None and not isinstance(getattr(logging, str(level).upper(), None), int):
            errors.append(f"Invalid logging level: {level}")

        return errors

    def as_config(self) -> Dict[str, Any]:
        """Settings as the plain mapping accepted by ``setup_logging``."""
        return {'logging': dict(self.logging)}


__all__ = ["LoaderSettings", "CONFIG_ENV_VAR", "DEFAULT_CONFIG_PATH"]
