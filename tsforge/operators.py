"""Name-based lookups over loaded schema metadata."""

from typing import Any, Optional, Sequence, Type, TypeVar

from .base_client import BaseClient
from .crud import CrudOperations, ViewOperations, build_operations, build_view_operations
from .errors import TableNotFoundError, ViewNotFoundError
from .models import EnumInfo, FunctionMetadata, SchemaMetadata, TableMetadata, ViewMetadata

T = TypeVar("T")


class SchemaOperators:
    """Resolves schema elements by name and builds operations for them.

    Lookups return None on a miss. ``get_*_operations`` raise a not-found
    error instead, because the caller asked for something by name.
    """

    def __init__(self, client: BaseClient, schemas: Sequence[SchemaMetadata]):
        self.client = client
        self.schemas = tuple(schemas)

    def get_schema(self, name: str) -> Optional[SchemaMetadata]:
        for schema in self.schemas:
            if schema.name == name:
                return schema
        return None

    def _lookup(self, schema_name: str, category: str, name: str) -> Optional[Any]:
        schema = self.get_schema(schema_name)
        if schema is None:
            return None
        return getattr(schema, category).get(name)

    def get_table(self, schema_name: str, table_name: str) -> Optional[TableMetadata]:
        return self._lookup(schema_name, "tables", table_name)

    def get_view(self, schema_name: str, view_name: str) -> Optional[ViewMetadata]:
        return self._lookup(schema_name, "views", view_name)

    def get_enum(self, schema_name: str, enum_name: str) -> Optional[EnumInfo]:
        return self._lookup(schema_name, "enums", enum_name)

    def get_function(self, schema_name: str, func_name: str) -> Optional[FunctionMetadata]:
        return self._lookup(schema_name, "functions", func_name)

    def get_procedure(self, schema_name: str, proc_name: str) -> Optional[FunctionMetadata]:
        return self._lookup(schema_name, "procedures", proc_name)

    def get_trigger(self, schema_name: str, trigger_name: str) -> Optional[FunctionMetadata]:
        return self._lookup(schema_name, "triggers", trigger_name)

    def get_table_operations(
        self, schema_name: str, table_name: str, model: Optional[Type[T]] = None
    ) -> CrudOperations[T]:
        """CRUD operations for a named table.

        Raises:
            TableNotFoundError: No such table in the loaded metadata
        """
        table = self.get_table(schema_name, table_name)
        if table is None:
            raise TableNotFoundError(schema_name, table_name)
        return build_operations(self.client, table, model=model)

    def get_view_operations(
        self, schema_name: str, view_name: str, model: Optional[Type[T]] = None
    ) -> ViewOperations[T]:
        """Read-only operations for a named view.

        Raises:
            ViewNotFoundError: No such view in the loaded metadata
        """
        view = self.get_view(schema_name, view_name)
        if view is None:
            raise ViewNotFoundError(schema_name, view_name)
        return build_view_operations(self.client, view, model=model)
