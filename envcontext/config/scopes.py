"""
Fallback Scopes
===============

Read-only lookups consulted when a referenced name is not defined by any
configuration source:

- ``EnvironmentScope``: live view of the process environment
- ``SystemProperties``: process-level properties describing the running
  interpreter and host, plus properties set explicitly at runtime
"""

import getpass
import os
import platform
import sys
import tempfile
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional

import psutil


class EnvironmentScope(Mapping):
    """Read-only view of ``os.environ``; changes to the environment show through."""

    def __init__(self, environ: Optional[Mapping] = None):
        self._environ = environ if environ is not None else os.environ

    def __getitem__(self, key: str) -> str:
        return self._environ[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._environ)

    def __len__(self) -> int:
        return len(self._environ)

    def __repr__(self) -> str:
        return f"EnvironmentScope({len(self)} variables)"


@dataclass
class HostInfo:
    """Information about the current process and host."""
    user_dir: str
    user_home: str
    user_name: str
    os_name: str
    os_arch: str
    os_version: str
    python_version: str
    machine_id: str
    cpu_count: int
    total_memory_gb: float


def detect_host_info() -> HostInfo:
    """Detect current process and host characteristics."""
    memory_gb = psutil.virtual_memory().total / (1024**3)
    cpu_count = psutil.cpu_count() or 1

    return HostInfo(
        user_dir=os.getcwd(),
        user_home=str(Path.home()),
        user_name=_get_user_name(),
        os_name=platform.system(),
        os_arch=platform.machine() or platform.architecture()[0],
        os_version=platform.release(),
        python_version=f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        machine_id=platform.node(),
        cpu_count=cpu_count,
        total_memory_gb=memory_gb,
    )


def _get_user_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # No login name and no USER/LOGNAME variables, e.g. in some containers
        return ""


class SystemProperties(Mapping):
    """
    Process-level properties.

    Detected host properties are computed once, on first access. Properties
    set with ``set_property`` take precedence over detected ones; clearing an
    explicit property restores the detected value, if any.
    """

    def __init__(self, detect: bool = True):
        self._lock = threading.RLock()
        self._detected: Optional[Dict[str, str]] = None if detect else {}
        self._explicit: Dict[str, str] = {}

    def _host_properties(self) -> Dict[str, str]:
        with self._lock:
            if self._detected is None:
                info = detect_host_info()
                self._detected = {
                    'user_dir': info.user_dir,
                    'user_home': info.user_home,
                    'user_name': info.user_name,
                    'os_name': info.os_name,
                    'os_arch': info.os_arch,
                    'os_version': info.os_version,
                    'python_version': info.python_version,
                    'machine_id': info.machine_id,
                    'cpu_count': str(info.cpu_count),
                    'total_memory_gb': f"{info.total_memory_gb:.1f}",
                    'file_separator': os.sep,
                    'path_separator': os.pathsep,
                    'tmp_dir': tempfile.gettempdir(),
                }
            return self._detected

    def _merged(self) -> Dict[str, str]:
        with self._lock:
            merged = dict(self._host_properties())
            merged.update(self._explicit)
            return merged

    def set_property(self, name: str, value: str) -> Optional[str]:
        """Set a property and return its previous value."""
        with self._lock:
            previous = self.get(name)
            self._explicit[name] = str(value)
            return previous

    def clear_property(self, name: str) -> Optional[str]:
        """Remove an explicitly set property and return its value."""
        with self._lock:
            return self._explicit.pop(name, None)

    def __getitem__(self, key: str) -> str:
        with self._lock:
            if key in self._explicit:
                return self._explicit[key]
            return self._host_properties()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._merged())

    def __len__(self) -> int:
        return len(self._merged())

    def __repr__(self) -> str:
        return f"SystemProperties({len(self._explicit)} explicit)"


_system_properties: Optional[SystemProperties] = None
_system_properties_lock = threading.Lock()


def system_properties() -> SystemProperties:
    """Get the process-wide ``SystemProperties`` instance."""
    global _system_properties
    with _system_properties_lock:
        if _system_properties is None:
            _system_properties = SystemProperties()
        return _system_properties


__all__ = [
    "EnvironmentScope",
    "HostInfo",
    "SystemProperties",
    "detect_host_info",
    "system_properties",
]
