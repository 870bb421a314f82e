"""Producer property file loaders.

Purpose
-------
Convert on-disk artifacts into Python mappings the merge layer understands.
Adapters are small wrappers around ``tomllib``/``json``/``yaml.safe_load`` and
a ``.properties`` parser so error handling and observability live in one
place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`TOMLFileLoader` – loader for TOML documents.
* :class:`JSONFileLoader` – minimal JSON loader.
* :class:`YAMLFileLoader` – YAML loader backed by PyYAML.
* :class:`PropertiesFileLoader` – Java-style ``key=value`` files, the format
  producer settings are most often shipped in.

System Role
-----------
Invoked by :func:`lib_sender_options.core.read_sender_options_raw` to parse a
property file before the merge policy flattens it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Final, Iterator, Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[assignment]

import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the file loaders."""

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing.

        Side Effects
        ------------
        Emits ``properties_file_read`` debug events.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b"acks=all")
        >>> tmp.close()
        >>> BaseFileLoader()._read(tmp.name)[:4]
        b'acks'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Properties file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("properties_file_read", source="file", path=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"acks": "all"}, path="demo")
        {'acks': 'all'}
        >>> BaseFileLoader._ensure_mapping(42, path="demo")
        Traceback (most recent call last):
        ...
        lib_sender_options.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data  # type: ignore[return-value]


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from TOML file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8')
        >>> _ = tmp.write('"bootstrap.servers" = "localhost:9092"')
        >>> tmp.close()
        >>> TOMLFileLoader().load(tmp.name)["bootstrap.servers"]
        'localhost:9092'
        >>> Path(tmp.name).unlink()
        """

        try:
            text = self._read(path).decode("utf-8")
            data = tomllib.loads(text)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:  # type: ignore[attr-defined]
            log_error("properties_file_invalid", source="file", path=path, format="toml", error=str(exc))
            raise InvalidFormat(f"Invalid TOML in {path}: {exc}") from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("properties_file_loaded", source="file", path=path, format="toml")
        return result


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log_error("properties_file_invalid", source="file", path=path, format="json", error=str(exc))
            raise InvalidFormat(f"Invalid JSON in {path}: {exc}") from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("properties_file_loaded", source="file", path=path, format="json")
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents; an empty document yields an empty mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            log_error("properties_file_invalid", source="file", path=path, format="yaml", error=str(exc))
            raise InvalidFormat(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            data = {}
        result = self._ensure_mapping(data, path=path)
        log_debug("properties_file_loaded", source="file", path=path, format="yaml")
        return result


class PropertiesFileLoader(BaseFileLoader):
    """Load Java-style ``.properties`` files.

    Keys and values are separated by the first unescaped ``=``, ``:`` or
    whitespace; a key alone on its line maps to ``""``. Blank lines and lines
    starting with ``#`` or ``!`` are ignored. A line ending in an odd number
    of backslashes continues on the next line with its leading whitespace
    removed, which is how multi-line entries such as ``sasl.jaas.config`` are
    usually written. Escapes (``\\=``, ``\\:``, ``\\\\``, ``\\t``, ``\\uXXXX``)
    are decoded. Values are kept as strings.
    """

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the properties file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8', suffix='.properties')
        >>> _ = tmp.write('# producer\\nacks=all\\nlinger.ms: 5\\n')
        >>> tmp.close()
        >>> PropertiesFileLoader().load(tmp.name)
        {'acks': 'all', 'linger.ms': '5'}
        >>> Path(tmp.name).unlink()
        """

        try:
            text = self._read(path).decode("utf-8")
        except UnicodeDecodeError as exc:
            log_error("properties_file_invalid", source="file", path=path, format="properties", error=str(exc))
            raise InvalidFormat(f"Invalid properties file {path}: {exc}") from exc
        result = _parse_properties(text, path=path)
        log_debug("properties_file_loaded", source="file", path=path, format="properties")
        return result


_SEPARATORS: Final[str] = "=:"
_WHITESPACE: Final[str] = " \t\f"
_ESCAPES: Final[dict[str, str]] = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _parse_properties(text: str, *, path: str) -> dict[str, object]:
    """Parse ``.properties`` text, raising ``InvalidFormat`` on malformed entries.

    Examples
    --------
    >>> _parse_properties("a=1\\n\\n! note\\nb : two words\\nc three", path="demo")
    {'a': '1', 'b': 'two words', 'c': 'three'}
    >>> _parse_properties("jaas=required \\\\\\n    user=alice;", path="demo")
    {'jaas': 'required user=alice;'}
    >>> _parse_properties("=orphan", path="demo")
    Traceback (most recent call last):
    ...
    lib_sender_options.domain.errors.InvalidFormat: Malformed line 1 in demo
    """

    result: dict[str, object] = {}
    for line_number, line in _logical_lines(text):
        try:
            key, value = _split_entry(line)
        except ValueError as exc:
            log_error("properties_invalid_line", source="file", path=path, line=line_number, error=str(exc))
            raise InvalidFormat(f"Malformed line {line_number} in {path}: {exc}") from exc
        if not key:
            log_error("properties_invalid_line", source="file", path=path, line=line_number)
            raise InvalidFormat(f"Malformed line {line_number} in {path}")
        result[key] = value
    return result


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(first_line_number, line)`` with continuations joined and comments dropped."""

    pending: str | None = None
    start = 0
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.lstrip(_WHITESPACE)
        if pending is None:
            if not line or line[0] in "#!":
                continue
            pending, start = "", line_number
        if _continues(line):
            pending += line[:-1]
            continue
        yield start, pending + line
        pending = None
    if pending is not None:
        yield start, pending


def _continues(line: str) -> bool:
    """Return ``True`` when *line* ends in an odd number of backslashes."""

    return (len(line) - len(line.rstrip("\\"))) % 2 == 1


def _split_entry(line: str) -> tuple[str, str]:
    """Split *line* at the first unescaped separator and decode both halves.

    Examples
    --------
    >>> _split_entry(r"a\\=b=c")
    ('a=b', 'c')
    >>> _split_entry("key   value")
    ('key', 'value')
    >>> _split_entry("lonely")
    ('lonely', '')
    """

    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1
    key, rest = line[:index], line[index:]
    rest = rest.lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def _unescape(text: str) -> str:
    """Decode backslash escapes; raises ``ValueError`` on a malformed ``\\uXXXX``."""

    if "\\" not in text:
        return text
    parts: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char != "\\":
            parts.append(char)
            index += 1
            continue
        if index + 1 >= len(text):
            break
        escaped = text[index + 1]
        if escaped == "u":
            digits = text[index + 2 : index + 6]
            if len(digits) != 4 or any(d not in "0123456789abcdefABCDEF" for d in digits):
                raise ValueError(f"invalid \\u escape {text[index:index + 6]!r}")
            parts.append(chr(int(digits, 16)))
            index += 6
            continue
        parts.append(_ESCAPES.get(escaped, escaped))
        index += 2
    return "".join(parts)
