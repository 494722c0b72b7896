"""tsforge - typed clients and TypeScript generation for a database REST API.

This package discovers schema metadata from the backend's ``/dt`` endpoints,
exposes generic CRUD operations for discovered tables, and generates
TypeScript interfaces from the metadata.
"""

from .base_client import BaseClient
from .crud import (
    CrudOperations,
    FilterOptions,
    ViewOperations,
    build_operations,
    build_view_operations,
    transform_filter_to_params,
)
from .errors import (
    ForgeError,
    TransportError,
    NotFoundError,
    TableNotFoundError,
    ViewNotFoundError,
    InvalidInputError,
    InvalidTableMetadataError,
    GenerationError,
)
from .forge import Forge
from .generator import GeneratedFile, TypeGenerator, to_pascal_case
from .health import HealthClient
from .metadata import MetadataClient
from .models import (
    ColumnMetadata,
    ColumnRef,
    EnumInfo,
    FunctionMetadata,
    MetadataSnapshot,
    SchemaMetadata,
    TableMetadata,
    ViewMetadata,
)
from .operators import SchemaOperators
from .type_mappers import TargetKind, TargetType, map_type, map_type_to_ts

__all__ = [
    # Facade and clients
    "Forge",
    "BaseClient",
    "MetadataClient",
    "HealthClient",
    "SchemaOperators",
    # CRUD
    "CrudOperations",
    "ViewOperations",
    "FilterOptions",
    "build_operations",
    "build_view_operations",
    "transform_filter_to_params",
    # Metadata models
    "ColumnMetadata",
    "ColumnRef",
    "EnumInfo",
    "FunctionMetadata",
    "MetadataSnapshot",
    "SchemaMetadata",
    "TableMetadata",
    "ViewMetadata",
    # Generation
    "GeneratedFile",
    "TypeGenerator",
    "to_pascal_case",
    "TargetKind",
    "TargetType",
    "map_type",
    "map_type_to_ts",
    # Errors
    "ForgeError",
    "TransportError",
    "NotFoundError",
    "TableNotFoundError",
    "ViewNotFoundError",
    "InvalidInputError",
    "InvalidTableMetadataError",
    "GenerationError",
]
