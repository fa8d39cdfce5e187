"""Lexical grammars for Reference Model string fields.

Pure predicate functions for identifiers, version trees, archetype ids,
URIs and ISO 8601 temporal values. The validator composes these through
``Matches`` rules; nothing here knows about nodes or paths.
"""

import re
from datetime import date, datetime, time
from typing import Optional

UUID_PATTERN = re.compile(r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}')

# ISO/IEC 8824 object identifier
ISO_OID_PATTERN = re.compile(
    r'(0|1)(\.(0|[1-9][0-9]*)){0,1}(\.(0|[1-9][0-9]*))*'
    r'|2(\.(0|[1-9][0-9]*))(\.(0|[1-9][0-9]*))*'
)

# RFC 1034 reverse domain name
INTERNET_ID_PATTERN = re.compile(
    r'([A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)'
    r'(?:\.([A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?))*'
)
INTERNET_ID_MAX_LENGTH = 255

# RFC 2396 namespace part
NAMESPACE_PATTERN = re.compile(r'([a-zA-Z])([a-zA-Z0-9_.:/&?=+-])*')

# RFC 3986 path part: segments separated by single slashes
_URI_SEGMENT = r"[a-zA-Z0-9\-._~!$&'()*+,;=:@%]+"
URI_PATTERN = re.compile(rf"/?(?:{_URI_SEGMENT}(?:/{_URI_SEGMENT})*/?)?")

# trunk_version [ '.' branch_number '.' branch_version ]
VERSION_TREE_ID_PATTERN = re.compile(r'([0-9]+)(\.([0-9]+)\.([0-9]+))?')

# rm_originator '-' rm_name '-' rm_entity '.' concept_name { '-' specialisation }* '.v' number
ARCHETYPE_ID_PATTERN = re.compile(
    r'([a-zA-Z0-9_]+)-([a-zA-Z0-9_]+)-([a-zA-Z0-9_]+)\.([a-zA-Z0-9_]+)(-[a-zA-Z0-9_]+)*\.v([0-9]+)'
)

DATE_PATTERN = re.compile(r'\d{4}(-\d{2}(-\d{2})?)?')
TIME_PATTERN = re.compile(r'\d{2}(:\d{2}(:\d{2}([.,]\d+)?)?)?(Z|[+-]\d{2}(:?\d{2})?)?')
RFC3339_PATTERN = re.compile(r'\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})')
DURATION_PATTERN = re.compile(
    r'-?P(?=\d|T\d)(\d+Y)?(\d+M)?(\d+W)?(\d+D)?(T(?=\d)(\d+H)?(\d+M)?(\d+([.,]\d+)?S)?)?'
)

EHR_URI_SCHEME = "ehr://"


def is_uuid(value: str) -> bool:
    return UUID_PATTERN.fullmatch(value) is not None


def is_iso_oid(value: str) -> bool:
    return ISO_OID_PATTERN.fullmatch(value) is not None


def is_internet_id(value: str) -> bool:
    if not value or len(value) > INTERNET_ID_MAX_LENGTH:
        return False
    return INTERNET_ID_PATTERN.fullmatch(value) is not None


def is_uid(value: str) -> bool:
    """Return True if value is a UUID, an ISO OID or an internet id."""
    if not value:
        return False
    return is_uuid(value) or is_iso_oid(value) or is_internet_id(value)


def is_namespace(value: str) -> bool:
    return NAMESPACE_PATTERN.fullmatch(value) is not None


def is_uri(value: str) -> bool:
    return URI_PATTERN.fullmatch(value) is not None


def is_ehr_uri(value: str) -> bool:
    return value.startswith(EHR_URI_SCHEME)


def is_version_tree_id(value: str) -> bool:
    return VERSION_TREE_ID_PATTERN.fullmatch(value) is not None


def is_archetype_id(value: str) -> bool:
    return ARCHETYPE_ID_PATTERN.fullmatch(value) is not None


def is_iso8601_date(value: str) -> bool:
    """Validate an ISO 8601 extended date, allowing reduced precision (YYYY, YYYY-MM)."""
    if DATE_PATTERN.fullmatch(value) is None:
        return False
    parts = [int(p) for p in value.split("-")]
    try:
        date(parts[0], parts[1] if len(parts) > 1 else 1, parts[2] if len(parts) > 2 else 1)
    except ValueError:
        return False
    return True


def is_iso8601_time(value: str) -> bool:
    """Validate an ISO 8601 extended time with optional fraction and zone."""
    match = TIME_PATTERN.fullmatch(value)
    if match is None:
        return False
    core = re.split(r'[Z+-]', value, maxsplit=1)[0].replace(",", ".")
    try:
        time.fromisoformat(core if ":" in core else f"{core}:00")
    except ValueError:
        return False
    return True


def is_rfc3339_utc(value: str) -> bool:
    """Validate a full RFC 3339 date-time expressed in UTC (trailing ``Z``)."""
    if not value.endswith("Z") or RFC3339_PATTERN.fullmatch(value) is None:
        return False
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_iso8601_duration(value: str) -> bool:
    return DURATION_PATTERN.fullmatch(value) is not None


def split_hier_object_id(value: str) -> tuple[str, Optional[str]]:
    """Split a HIER_OBJECT_ID value into root and optional extension.

    Raises:
        ValueError: If the value contains more than one ``::`` separator
    """
    parts = value.split("::")
    if len(parts) > 2:
        raise ValueError(f"too many '::' separators in {value!r}")
    return parts[0], parts[1] if len(parts) == 2 else None


def split_object_version_id(value: str) -> tuple[str, str, str]:
    """Split an OBJECT_VERSION_ID value into object_id, creating_system_id, version_tree_id.

    Raises:
        ValueError: If the value does not have exactly three ``::`` parts
    """
    parts = value.split("::")
    if len(parts) != 3:
        raise ValueError(f"expected 'object_id::creating_system_id::version_tree_id', got {value!r}")
    return parts[0], parts[1], parts[2]
