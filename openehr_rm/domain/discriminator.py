"""Discriminator extraction.

Reads the root-level ``_type`` of a serialized node without building the
object: nested objects, arrays and string values are skipped byte by byte,
so a ``_type`` key inside a child never leaks out as the root tag.
"""

from typing import Any, Mapping, Union

TYPE_KEY = "_type"

_TYPE_KEY_BYTES = b"_type"
_WHITESPACE = b" \t\r\n"


def extract_discriminator(raw: Union[bytes, bytearray, memoryview, str, Mapping[str, Any]]) -> str:
    """Return the root-level ``_type`` string of a single node, or ``""``.

    ``""`` is returned when the tag is missing, is not a string, or the
    input is not a JSON object. Callers apply the family default.

    Parameters:
        raw: Serialized node, or an already parsed mapping

    Returns:
        str: The discriminator, possibly empty
    """
    if isinstance(raw, Mapping):
        value = raw.get(TYPE_KEY)
        return value if isinstance(value, str) else ""
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    return _scan(bytes(raw))


def _skip_ws(data: bytes, i: int) -> int:
    n = len(data)
    while i < n and data[i] in _WHITESPACE:
        i += 1
    return i


def _end_of_string(data: bytes, i: int) -> int:
    """Given the index just past an opening quote, return the index of the closing quote or -1."""
    n = len(data)
    while i < n:
        c = data[i]
        if c == 0x5C:  # backslash
            i += 2
            continue
        if c == 0x22:  # quote
            return i
        i += 1
    return -1


def _skip_value(data: bytes, i: int) -> int:
    """Skip one JSON value starting at ``i``; return the index just past it or -1."""
    n = len(data)
    if i >= n:
        return -1
    opener = data[i]
    if opener == 0x22:
        end = _end_of_string(data, i + 1)
        return -1 if end < 0 else end + 1
    if opener in b"{[":
        depth = 0
        while i < n:
            c = data[i]
            if c == 0x22:
                end = _end_of_string(data, i + 1)
                if end < 0:
                    return -1
                i = end + 1
                continue
            if c in b"{[":
                depth += 1
            elif c in b"}]":
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
        return -1
    # true, false, null, number
    while i < n and data[i] not in b",}":
        i += 1
    return i


def _scan(data: bytes) -> str:
    i = _skip_ws(data, 0)
    if i >= len(data) or data[i] != 0x7B:  # {
        return ""
    i += 1
    n = len(data)
    while True:
        i = _skip_ws(data, i)
        if i >= n or data[i] == 0x7D:  # }
            return ""
        if data[i] != 0x22:
            return ""
        key_end = _end_of_string(data, i + 1)
        if key_end < 0:
            return ""
        key = data[i + 1:key_end]
        i = _skip_ws(data, key_end + 1)
        if i >= n or data[i] != 0x3A:  # :
            return ""
        i = _skip_ws(data, i + 1)
        if key == _TYPE_KEY_BYTES:
            if i >= n or data[i] != 0x22:
                return ""
            value_end = _end_of_string(data, i + 1)
            if value_end < 0:
                return ""
            return data[i + 1:value_end].decode("utf-8", errors="replace")
        i = _skip_value(data, i)
        if i < 0:
            return ""
        i = _skip_ws(data, i)
        if i < n and data[i] == 0x2C:  # ,
            i += 1
