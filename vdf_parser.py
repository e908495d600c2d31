# vdf_parser.py
# -*- coding: utf-8 -*-
"""
Parser for Valve's text Key-Value format (VDF / ACF).

Steam stores libraryfolders.vdf and the appmanifest_*.acf files in this
format:

    "AppState"
    {
        "appid"      "413150"
        "name"       "Stardew Valley"
        "installdir" "Stardew Valley"
    }

A parsed document is a tree of two node types:
- VdfValue: a leaf holding a string
- VdfTable: an ordered list of (key, node) entries, in file order

Keys are not guaranteed to be unique in the format; all entries are kept
and lookups return the first match. Key matching is case-sensitive.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import vdf


class VdfParseError(ValueError):
    """Raised when a document does not follow the Key-Value grammar."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"[Line: {line}, Column: {column}] {message}")
        self.line = line
        self.column = column


@dataclass(frozen=True)
class VdfValue:
    """A string leaf."""
    value: str


@dataclass(frozen=True)
class VdfTable:
    """An ordered table of (key, node) entries. Duplicate keys are preserved."""
    entries: Tuple[Tuple[str, "KeyValueNode"], ...] = ()

    def get(self, key: str, default=None):
        """Return the first node stored under `key`, or `default`."""
        for entry_key, node in self.entries:
            if entry_key == key:
                return node
        return default

    def get_all(self, key: str) -> list:
        """Return every node stored under `key`, in file order."""
        return [node for entry_key, node in self.entries if entry_key == key]

    def keys(self) -> list:
        return [entry_key for entry_key, _ in self.entries]

    def items(self) -> list:
        return list(self.entries)

    def __contains__(self, key) -> bool:
        return any(entry_key == key for entry_key, _ in self.entries)

    def __iter__(self):
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.entries)


KeyValueNode = Union[VdfValue, VdfTable]


def _decode(data: Union[bytes, str]) -> str:
    if isinstance(data, str):
        return data.lstrip('\ufeff')
    try:
        return data.decode('utf-8-sig')
    except UnicodeDecodeError:
        logging.warning("Encoding error decoding VDF data. Trying fallback encoding (latin-1)...")
        return data.decode('latin-1')


def _from_vdf_dict(data) -> VdfTable:
    entries = []
    for key, value in data.items():
        if isinstance(value, str):
            entries.append((key, VdfValue(value)))
        else:
            entries.append((key, _from_vdf_dict(value)))
    return VdfTable(tuple(entries))


def loads(text: str) -> VdfTable:
    """
    Parse Key-Value text into a tree.

    Args:
        text: Document content

    Returns:
        Root VdfTable holding the top-level entries

    Raises:
        VdfParseError: On an unterminated string or block, or an unexpected token
    """
    try:
        # VDFDict keeps file order and duplicate keys; duplicate tables stay separate
        data = vdf.loads(text, mapper=vdf.VDFDict, merge_duplicate_keys=False)
    except SyntaxError as e:
        raise VdfParseError(e.msg, e.lineno or 0, e.offset or 0) from e
    return _from_vdf_dict(data)


def parse(data: Union[bytes, str]) -> VdfTable:
    """Parse raw file content (bytes are decoded as UTF-8, latin-1 as fallback)."""
    return loads(_decode(data))


def load(file_path) -> VdfTable:
    """
    Read and parse a VDF/ACF file.

    Raises:
        OSError: If the file cannot be read
        VdfParseError: If the content is malformed
    """
    with open(file_path, 'rb') as f:
        data = f.read()
    return parse(data)


def lookup(node: KeyValueNode, key: Union[str, Sequence[str]]) -> Optional[KeyValueNode]:
    """
    Find a node by path.

    Args:
        node: Where to start
        key: Dotted path ("AppState.appid") or a sequence of key segments,
             for keys that themselves contain dots

    Returns:
        The node at the path, or None if a segment is missing or a
        segment would descend into a string value
    """
    segments = key.split('.') if isinstance(key, str) else list(key)
    current = node
    for segment in segments:
        if not isinstance(current, VdfTable):
            return None
        current = current.get(segment)
        if current is None:
            return None
    return current


def get_str(node: KeyValueNode, key: Union[str, Sequence[str]], default: str = "") -> str:
    """String value at `key`, or `default` if missing or not a string."""
    found = lookup(node, key)
    if isinstance(found, VdfValue):
        return found.value
    return default


def _to_vdf_dict(table: VdfTable) -> vdf.VDFDict:
    result = vdf.VDFDict()
    for key, node in table.entries:
        if isinstance(node, VdfTable):
            result[key] = _to_vdf_dict(node)
        else:
            result[key] = node.value
    return result


def dumps(node: VdfTable) -> str:
    """Serialize a tree back to text VDF, keeping entry order and duplicate keys."""
    if not isinstance(node, VdfTable):
        raise TypeError(f"Expected a VdfTable, got {type(node).__name__}")
    return vdf.dumps(_to_vdf_dict(node), pretty=True)
