"""PostgreSQL to TypeScript type mapping.

Raw column types reported by the backend (``varchar(255)``, ``_int4``,
``timestamp with time zone``...) are mapped to a small set of target kinds.
The kinds are rendered to TypeScript by :meth:`TargetType.to_typescript`.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, date
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_QUALIFIER_RE = re.compile(r"\(.*\)")


class TargetKind(str, Enum):
    """Semantic type tags a source column can map to."""
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    OBJECT = "object"
    ARRAY = "array"
    UNKNOWN = "unknown"


_TS_NAMES = {
    TargetKind.NUMBER: "number",
    TargetKind.STRING: "string",
    TargetKind.BOOLEAN: "boolean",
    TargetKind.TIMESTAMP: "Date",
    TargetKind.OBJECT: "Record<string, unknown>",
    TargetKind.UNKNOWN: "unknown",
}


@dataclass(frozen=True)
class TargetType:
    """A mapped target type. ``element`` is set only for arrays."""
    kind: TargetKind
    element: Optional["TargetType"] = None

    @property
    def is_unknown(self) -> bool:
        return self.kind is TargetKind.UNKNOWN

    def to_typescript(self) -> str:
        """Render the type as a TypeScript type expression."""
        if self.kind is TargetKind.ARRAY:
            inner = self.element.to_typescript() if self.element else "unknown"
            if " " in inner:
                inner = f"({inner})"
            return f"{inner}[]"
        return _TS_NAMES[self.kind]


NUMBER = TargetType(TargetKind.NUMBER)
STRING = TargetType(TargetKind.STRING)
BOOLEAN = TargetType(TargetKind.BOOLEAN)
TIMESTAMP = TargetType(TargetKind.TIMESTAMP)
OBJECT = TargetType(TargetKind.OBJECT)
UNKNOWN = TargetType(TargetKind.UNKNOWN)


def array_of(element: TargetType) -> TargetType:
    """Build an array type of ``element``."""
    return TargetType(TargetKind.ARRAY, element)


PG_TYPE_MAPPINGS: Dict[str, TargetType] = {
    # Numeric types
    "smallint": NUMBER,
    "integer": NUMBER,
    "int": NUMBER,
    "int2": NUMBER,
    "int4": NUMBER,
    "int8": NUMBER,
    "bigint": NUMBER,
    "decimal": NUMBER,
    "numeric": NUMBER,
    "real": NUMBER,
    "float4": NUMBER,
    "float8": NUMBER,
    "double precision": NUMBER,
    "smallserial": NUMBER,
    "serial": NUMBER,
    "bigserial": NUMBER,

    # Character types
    "character": STRING,
    "character varying": STRING,
    "char": STRING,
    "bpchar": STRING,
    "varchar": STRING,
    "text": STRING,
    "citext": STRING,
    "name": STRING,

    # Boolean
    "boolean": BOOLEAN,
    "bool": BOOLEAN,

    # Date/time types (time of day and intervals stay strings)
    "timestamp": TIMESTAMP,
    "timestamptz": TIMESTAMP,
    "timestamp with time zone": TIMESTAMP,
    "timestamp without time zone": TIMESTAMP,
    "date": TIMESTAMP,
    "time": STRING,
    "timetz": STRING,
    "time with time zone": STRING,
    "time without time zone": STRING,
    "interval": STRING,

    # UUID
    "uuid": STRING,

    # JSON
    "json": OBJECT,
    "jsonb": OBJECT,

    # Network address types
    "inet": STRING,
    "cidr": STRING,
    "macaddr": STRING,
    "macaddr8": STRING,

    # Geometric types
    "point": STRING,
    "line": STRING,
    "lseg": STRING,
    "box": STRING,
    "path": STRING,
    "polygon": STRING,
    "circle": STRING,

    # Money
    "money": STRING,

    # Bit strings
    "bit": STRING,
    "bit varying": STRING,
    "varbit": STRING,

    # Text search
    "tsvector": STRING,
    "tsquery": STRING,

    # XML and binary
    "xml": STRING,
    "bytea": STRING,
}


def normalize_type(raw_type: str) -> str:
    """Lower-case, drop any parenthesized qualifier and trim.

    >>> normalize_type("VARCHAR(255)")
    'varchar'
    """
    return _QUALIFIER_RE.sub("", raw_type.lower()).strip()


class TypeMapper(ABC):
    """Abstract base class for database type mapping."""

    @abstractmethod
    def to_target_type(self, db_type: str) -> TargetType:
        """Convert a database type to a target type."""
        pass

    def to_typescript_type(self, db_type: str) -> str:
        """Convert a database type to a TypeScript type expression."""
        return self.to_target_type(db_type).to_typescript()


class PostgresTypeMapper(TypeMapper):
    """Type mapper for PostgreSQL types as reported by the backend."""

    def __init__(self, mappings: Optional[Dict[str, TargetType]] = None):
        self.mappings = mappings if mappings is not None else PG_TYPE_MAPPINGS

    def _lookup(self, base_type: str) -> Optional[TargetType]:
        if base_type in self.mappings:
            return self.mappings[base_type]

        # _int4, _text... are the catalog names of array types
        if base_type.startswith("_") and len(base_type) > 1:
            element = self._lookup(base_type[1:])
            return array_of(element) if element else None

        # integer[], text[] is the SQL spelling
        if base_type.endswith("[]"):
            element = self._lookup(base_type[:-2].strip())
            return array_of(element) if element else None

        return None

    def to_target_type(self, db_type: str) -> TargetType:
        """Convert a PostgreSQL type to a target type.

        Unrecognized types log a warning and map to ``UNKNOWN``. Never raises.
        """
        if not isinstance(db_type, str):
            logger.warning("Unknown PostgreSQL type: %r, defaulting to 'unknown'", db_type)
            return UNKNOWN

        mapped = self._lookup(normalize_type(db_type))
        if mapped is None:
            logger.warning("Unknown PostgreSQL type: %s, defaulting to 'unknown'", db_type)
            return UNKNOWN
        return mapped


_default_mapper = PostgresTypeMapper()


def map_type(raw_type: str) -> TargetType:
    """Map a raw PostgreSQL type name to its target type."""
    return _default_mapper.to_target_type(raw_type)


def map_type_to_ts(raw_type: str) -> str:
    """Map a raw PostgreSQL type name straight to a TypeScript type."""
    return _default_mapper.to_typescript_type(raw_type)


def validate_value(value: Any, raw_type: str) -> bool:
    """Check that a runtime value matches the type mapped from ``raw_type``.

    None is accepted for every type. Unknown types always pass.
    """
    if value is None:
        return True

    target = map_type(raw_type)
    kind = target.kind

    if kind is TargetKind.STRING:
        return isinstance(value, str)
    if kind is TargetKind.NUMBER:
        # bool is an int subclass
        return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value
    if kind is TargetKind.BOOLEAN:
        return isinstance(value, bool)
    if kind is TargetKind.TIMESTAMP:
        return isinstance(value, (datetime, date))
    if kind is TargetKind.OBJECT:
        return isinstance(value, dict)
    if kind is TargetKind.ARRAY:
        return isinstance(value, (list, tuple))
    return True


def convert_value(value: Any, raw_type: str) -> Any:
    """Convert a wire value to the Python type matching ``raw_type``.

    Values that fail to convert are returned unchanged.
    """
    if value is None:
        return None

    target = map_type(raw_type)
    kind = target.kind

    try:
        if kind is TargetKind.STRING:
            return str(value)
        if kind is TargetKind.NUMBER:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return value
            text = str(value)
            return int(text) if re.fullmatch(r"[+-]?\d+", text) else float(text)
        if kind is TargetKind.BOOLEAN:
            if isinstance(value, str):
                return value.strip().lower() in ("true", "t", "1", "yes", "y", "on")
            return bool(value)
        if kind is TargetKind.TIMESTAMP:
            if isinstance(value, (datetime, date)):
                return value
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        if kind is TargetKind.OBJECT:
            return json.loads(value) if isinstance(value, str) else value
        if kind is TargetKind.ARRAY and isinstance(value, str):
            return json.loads(value)
    except (ValueError, TypeError) as e:
        logger.error("Error converting value to type %s: %s", target.to_typescript(), e)
        return value

    return value
