"""Configuration package.

Raw table loading, fallback scopes and loader settings.
"""
from .raw_table import RawEntry, parse_stream, parse_text, read_entries, build_table  # noqa: F401
from .scopes import EnvironmentScope, SystemProperties, system_properties  # noqa: F401
from .settings import LoaderSettings  # noqa: F401
