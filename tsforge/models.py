"""Pydantic models for the schema metadata reported by the backend.

Every object carries an ``object_type`` discriminant (table, view, enum,
function, procedure, trigger) so consumers can switch on it instead of
probing for fields. Models are frozen: a metadata snapshot is never mutated
in place, a refresh replaces it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ColumnRef(BaseModel):
    """Foreign-key target of a column."""
    schema_name: str = Field(alias="schema")
    table: str
    column: str

    class Config:
        populate_by_name = True
        frozen = True


class ColumnMetadata(BaseModel):
    """Table column."""
    name: str
    type: str
    nullable: bool = True
    is_pk: bool = Field(default=False, validation_alias=AliasChoices("is_pk", "is_primary_key"))
    is_enum: bool = False
    references: Optional[ColumnRef] = None

    class Config:
        populate_by_name = True
        frozen = True


class TableMetadata(BaseModel):
    """Table metadata as returned by ``/dt/schemas``."""
    name: str
    schema_name: str = Field(alias="schema")
    columns: List[ColumnMetadata] = Field(default_factory=list)
    object_type: Literal["table"] = "table"

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def primary_keys(self) -> List[str]:
        """Names of the columns flagged as primary key, in column order."""
        return [col.name for col in self.columns if col.is_pk]

    @property
    def primary_key(self) -> str:
        """Column used to address single records; ``id`` when none is flagged."""
        keys = self.primary_keys
        return keys[0] if keys else "id"


class ViewColumnMetadata(BaseModel):
    """View column (no key or reference information)."""
    name: str
    type: str
    nullable: bool = True

    class Config:
        frozen = True


class ViewMetadata(BaseModel):
    """View metadata."""
    name: str
    schema_name: str = Field(alias="schema")
    view_columns: List[ViewColumnMetadata] = Field(
        default_factory=list,
        validation_alias=AliasChoices("view_columns", "columns"),
    )
    object_type: Literal["view"] = "view"

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def columns(self) -> List[ViewColumnMetadata]:
        return self.view_columns


class EnumInfo(BaseModel):
    """Enum type with its values in declaration order."""
    name: str
    values: List[str] = Field(default_factory=list)
    object_type: Literal["enum"] = "enum"

    class Config:
        frozen = True

    @field_validator("values")
    @classmethod
    def _values_unique(cls, values: List[str]) -> List[str]:
        seen = set()
        for value in values:
            if value in seen:
                raise ValueError(f"duplicate enum value: {value!r}")
            seen.add(value)
        return values


class FunctionParameter(BaseModel):
    """Function or procedure parameter."""
    name: str
    type: str
    mode: Literal["in", "out", "inout", "variadic"] = "in"
    has_default: bool = False
    default_value: Optional[str] = None

    class Config:
        frozen = True

    @field_validator("mode", mode="before")
    @classmethod
    def _lower_mode(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class ReturnColumn(BaseModel):
    """Column of a set-returning function."""
    name: str
    type: str

    class Config:
        frozen = True


class FunctionMetadata(BaseModel):
    """Function, procedure or trigger metadata."""
    name: str
    schema_name: str = Field(alias="schema")
    object_type: Literal["function", "procedure", "trigger"] = "function"
    type: Optional[str] = None
    description: Optional[str] = None
    parameters: List[FunctionParameter] = Field(default_factory=list)
    return_type: Optional[str] = None
    return_columns: Optional[List[ReturnColumn]] = None
    is_strict: bool = False

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("object_type", mode="before")
    @classmethod
    def _lower_object_type(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


def _key_by_name(value: Any) -> Any:
    """Accept a list of named objects where a name-keyed map is expected.

    Raises:
        ValueError: An entry has no name, or two entries share one
    """
    if value is None:
        return {}
    if not isinstance(value, list):
        return value

    keyed: Dict[str, Any] = {}
    for index, item in enumerate(value):
        if isinstance(item, BaseModel):
            name = getattr(item, "name", None)
        elif isinstance(item, dict):
            name = item.get("name")
        else:
            name = None
        if not isinstance(name, str) or not name:
            raise ValueError(f"entry {index} has no name")
        if name in keyed:
            raise ValueError(f"duplicate name: {name!r}")
        keyed[name] = item
    return keyed


class SchemaMetadata(BaseModel):
    """Everything the backend reports for one schema."""
    name: str
    tables: Dict[str, TableMetadata] = Field(default_factory=dict)
    views: Dict[str, ViewMetadata] = Field(default_factory=dict)
    enums: Dict[str, EnumInfo] = Field(default_factory=dict)
    functions: Dict[str, FunctionMetadata] = Field(default_factory=dict)
    procedures: Dict[str, FunctionMetadata] = Field(default_factory=dict)
    triggers: Dict[str, FunctionMetadata] = Field(default_factory=dict)

    class Config:
        frozen = True

    @field_validator("tables", "views", "enums", "functions", "procedures", "triggers", mode="before")
    @classmethod
    def _normalize_collection(cls, value: Any) -> Any:
        return _key_by_name(value)

    def counts(self) -> Dict[str, int]:
        """Number of objects per category."""
        return {
            "tables": len(self.tables),
            "views": len(self.views),
            "enums": len(self.enums),
            "functions": len(self.functions),
            "procedures": len(self.procedures),
            "triggers": len(self.triggers),
        }

    @property
    def is_empty(self) -> bool:
        return sum(self.counts().values()) == 0


class HealthStatus(BaseModel):
    """Response of ``GET /health``."""
    status: str
    timestamp: Optional[str] = None
    version: Optional[str] = None
    uptime: Optional[float] = None


class CacheStatus(BaseModel):
    """Response of ``GET /health/cache``."""
    last_updated: Optional[str] = None
    total_items: int = 0
    tables_cached: int = 0
    views_cached: int = 0
    enums_cached: int = 0
    functions_cached: int = 0
    procedures_cached: int = 0
    triggers_cached: int = 0


class ClearCacheResult(BaseModel):
    """Response of ``POST /health/clear-cache``."""
    status: str
    message: str = ""


@dataclass(frozen=True)
class MetadataSnapshot:
    """Point-in-time description of all loaded schemas."""
    schemas: Tuple[SchemaMetadata, ...] = ()
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def schema_names(self) -> List[str]:
        return [schema.name for schema in self.schemas]


SchemaObject = Union[TableMetadata, ViewMetadata, EnumInfo, FunctionMetadata]


def is_table(obj: Any) -> bool:
    return getattr(obj, "object_type", None) == "table"


def is_view(obj: Any) -> bool:
    return getattr(obj, "object_type", None) == "view"


def is_enum(obj: Any) -> bool:
    return getattr(obj, "object_type", None) == "enum"


def is_function(obj: Any) -> bool:
    """True for functions, procedures and triggers."""
    return getattr(obj, "object_type", None) in ("function", "procedure", "trigger")
