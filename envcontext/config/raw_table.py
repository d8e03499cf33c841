"""
Raw Table Loader
================

Reads ``KEY=VALUE`` sources into ordered ``RawEntry`` sequences.

Line syntax is handled by python-dotenv's parser (``export`` prefixes,
quoting, ``#`` comments, blank lines). Lines it cannot bind are retried with
the ``KEY: VALUE`` separator, and ``!`` starts a comment line. Values are
kept raw: placeholders are expanded later by the resolution engine.
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, IO, Iterable, Iterator, List, Optional, Tuple, Union

from dotenv.parser import Binding, parse_stream as parse_bindings

from ..exceptions import EnvContextLoaderError, SourceNotFoundError

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ('#', '!')
QUOTES = ('"', "'")


@dataclass(frozen=True)
class RawEntry:
    """One parsed ``key -> raw value`` line of a source."""
    key: str
    raw_value: str
    source: str
    line: int = 0


def parse_stream(stream: IO[str], source: str = "<stream>") -> Iterator[RawEntry]:
    """
    Parse a text stream into raw entries, preserving order and duplicates.

    Args:
        stream: Text stream to read
        source: Label recorded on every entry

    Yields:
        RawEntry for every bound line
    """
    for binding in parse_bindings(stream):
        text = binding.original.string.strip()
        if not text or text.startswith(COMMENT_PREFIXES):
            continue
        line = _binding_line(binding)

        if binding.key is not None and binding.value is not None and ':' not in binding.key:
            yield RawEntry(key=binding.key, raw_value=binding.value, source=source, line=line)
            continue

        parsed = _parse_colon_line(text)
        if parsed is not None:
            key, value = parsed
            yield RawEntry(key=key, raw_value=value, source=source, line=line)
        else:
            logger.debug(f"Skipping unparseable line {line} in {source}: {text!r}")


def parse_text(text: str, source: str = "<string>") -> List[RawEntry]:
    """Parse source text held in memory."""
    return list(parse_stream(io.StringIO(text), source))


def read_entries(path: Union[str, Path], encoding: str = 'utf-8') -> List[RawEntry]:
    """
    Read every entry of a source file.

    Args:
        path: Source file path
        encoding: Text encoding of the file

    Returns:
        Entries in file order

    Raises:
        SourceNotFoundError: the file does not exist
        EnvContextLoaderError: the file cannot be read or decoded
    """
    path = Path(path)
    if not path.is_file():
        raise SourceNotFoundError(path)

    try:
        with path.open('r', encoding=encoding) as f:
            entries = list(parse_stream(f, str(path)))
    except (OSError, UnicodeDecodeError) as e:
        raise EnvContextLoaderError(f"Failed to read {path}: {e}") from e

    logger.debug(f"Parsed {len(entries)} entries from {path}")
    return entries


def build_table(entries: Iterable[RawEntry]) -> Dict[str, str]:
    """
    Collapse entries into a ``key -> raw value`` table.

    Keys are trimmed; a key seen again keeps its first position but takes
    the last value.
    """
    table: Dict[str, str] = {}
    for entry in entries:
        table[entry.key.strip()] = entry.raw_value
    return table


# ------------------------------------------------------------------
def _binding_line(binding: Binding) -> int:
    # The binding's mark sits before any leading blank lines
    text = binding.original.string
    leading = text[:len(text) - len(text.lstrip())]
    return binding.original.line + leading.count('\n')


def _parse_colon_line(text: str) -> Optional[Tuple[str, str]]:
    line = text.strip()
    if not line or line.startswith(COMMENT_PREFIXES):
        return None

    if line.startswith('export '):
        line = line[len('export '):].lstrip()

    key, sep, value = line.partition(':')
    key = key.strip()
    if not sep or not key or '=' in key:
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] in QUOTES and value[-1] == value[0]:
        value = value[1:-1]
    return key, value


__all__ = ["RawEntry", "parse_stream", "parse_text", "read_entries", "build_table"]
