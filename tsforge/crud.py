"""Generic CRUD operations bound to a table's resource path."""

import json
import logging
from typing import Any, Dict, Generic, List, Literal, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import quote

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from .base_client import BaseClient
from .errors import ForgeError, InvalidInputError, InvalidTableMetadataError, NotFoundError, TransportError
from .models import TableMetadata, ViewMetadata

logger = logging.getLogger(__name__)

T = TypeVar("T")

RecordId = Union[str, int]


class FilterOptions(BaseModel):
    """Narrows a collection read."""
    where: Optional[Dict[str, Any]] = None
    order_by: Optional[Dict[str, Literal["asc", "desc"]]] = Field(
        default=None,
        validation_alias=AliasChoices("order_by", "orderBy"),
    )
    limit: Optional[int] = Field(default=None, ge=0)
    offset: Optional[int] = Field(default=None, ge=0)

    class Config:
        populate_by_name = True


FilterLike = Union[FilterOptions, Mapping[str, Any], None]


def _coerce_filter(filter: FilterLike) -> FilterOptions:
    if filter is None:
        return FilterOptions()
    if isinstance(filter, FilterOptions):
        return filter
    try:
        return FilterOptions.model_validate(dict(filter))
    except (ValidationError, TypeError, ValueError) as e:
        details = e.errors() if isinstance(e, ValidationError) else str(e)
        raise InvalidInputError("Invalid filter options", details=details) from e


def transform_filter_to_params(filter: FilterLike = None) -> Dict[str, str]:
    """Transform filter options into query parameters.

    ``where`` and ``order_by`` travel as one JSON-encoded parameter each,
    ``limit`` and ``offset`` as plain numbers. Absent fields add nothing.

    >>> transform_filter_to_params({"limit": 10, "offset": 5})
    {'limit': '10', 'offset': '5'}
    """
    options = _coerce_filter(filter)
    params: Dict[str, str] = {}

    if options.where is not None:
        params["where"] = json.dumps(options.where, default=str)
    if options.order_by is not None:
        params["order_by"] = json.dumps(options.order_by)
    if options.limit is not None:
        params["limit"] = str(options.limit)
    if options.offset is not None:
        params["offset"] = str(options.offset)

    return params


def _validate_metadata(metadata: Any, model: Type[BaseModel], kind: str) -> Any:
    """Validate factory input eagerly, before any request can be made."""
    if metadata is None:
        raise InvalidTableMetadataError(f"{kind.capitalize()} metadata is required")

    if isinstance(metadata, model):
        parsed = metadata
    elif isinstance(metadata, Mapping):
        try:
            parsed = model.model_validate(dict(metadata))
        except ValidationError as e:
            raise InvalidTableMetadataError(f"Invalid {kind} metadata: {e.error_count()} error(s)", details=e.errors()) from e
    else:
        raise InvalidTableMetadataError(f"Expected {model.__name__}, got {type(metadata).__name__}")

    if not parsed.name or not parsed.name.strip():
        raise InvalidTableMetadataError(f"{kind.capitalize()} metadata has no name")
    if not parsed.schema_name or not parsed.schema_name.strip():
        raise InvalidTableMetadataError(f"{kind.capitalize()} '{parsed.name}' has no schema")
    return parsed


class ReadOperations(Generic[T]):
    """Collection reads against ``/{schema}/{name}``.

    Records are returned as dicts, or parsed into ``model`` when one is given.
    """

    def __init__(self, client: BaseClient, schema: str, name: str, model: Optional[Type[T]] = None):
        self.client = client
        self.schema = schema
        self.name = name
        self.model = model
        self.base_path = f"/{quote(schema, safe='')}/{quote(name, safe='')}"

    def _wrap(self, record: Any) -> T:
        if self.model is not None and isinstance(record, dict):
            return self.model.model_validate(record)
        return record

    def _fetch_rows(self, params: Dict[str, str]) -> List[T]:
        try:
            payload = self.client.request(self.base_path, method="GET", params=params)
        except NotFoundError:
            return []
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise TransportError(
                f"Unexpected response for {self.base_path}: expected a list",
                code="UNEXPECTED_RESPONSE",
                details=payload,
            )
        return [self._wrap(record) for record in payload]

    def find_all(self, filter: FilterLike = None) -> List[T]:
        """Retrieve all records, optionally filtered. Empty results give []."""
        return self._fetch_rows(transform_filter_to_params(filter))

    def find_many(self, filter: FilterLike) -> List[T]:
        """Retrieve the records matching a (required) filter."""
        if filter is None:
            raise InvalidInputError("find_many requires a filter; use find_all to read everything")
        return self._fetch_rows(transform_filter_to_params(filter))

    def count(self, filter: FilterLike = None) -> int:
        """Count records matching an optional filter."""
        params = transform_filter_to_params(filter)
        params["count"] = "true"
        payload = self.client.request(self.base_path, method="GET", params=params)

        if isinstance(payload, dict) and "count" in payload:
            payload = payload["count"]
        if isinstance(payload, bool) or not isinstance(payload, (int, float, str)):
            raise TransportError(
                f"Unexpected count response for {self.base_path}",
                code="UNEXPECTED_RESPONSE",
                details=payload,
            )
        try:
            return int(payload)
        except ValueError as e:
            raise TransportError(
                f"Unexpected count response for {self.base_path}",
                code="UNEXPECTED_RESPONSE",
                details=payload,
            ) from e


class CrudOperations(ReadOperations[T]):
    """Standard create/read/update/delete/count operations for one table."""

    def __init__(self, client: BaseClient, table: TableMetadata, model: Optional[Type[T]] = None):
        super().__init__(client, table.schema_name, table.name, model=model)
        self.table = table
        self.primary_key = table.primary_key

    def _record_path(self, id: RecordId) -> str:
        return f"{self.base_path}/{quote(str(id), safe='')}"

    def _single(self, payload: Any, id: Optional[RecordId] = None) -> T:
        # Some backends wrap a single row in a list
        if isinstance(payload, list):
            if len(payload) > 1:
                raise ForgeError(
                    f"Expected one record from {self.base_path}, got {len(payload)}",
                    code="AMBIGUOUS_RESULT",
                    details={"id": id},
                )
            payload = payload[0] if payload else None
        if not payload:
            raise NotFoundError(
                f"No record found with id {id} in {self.schema}.{self.name}",
                details={"schema": self.schema, "table": self.name, "id": id},
            )
        return self._wrap(payload)

    def find_one(self, id: RecordId) -> T:
        """Retrieve a single record by primary key.

        Raises:
            NotFoundError: The backend reports no record with this id
        """
        try:
            payload = self.client.request(self._record_path(id), method="GET")
        except NotFoundError as e:
            raise NotFoundError(
                f"No record found with id {id} in {self.schema}.{self.name}",
                details={"schema": self.schema, "table": self.name, "id": id},
            ) from e
        return self._single(payload, id)

    def create(self, data: Mapping[str, Any]) -> T:
        """Create a record; returns the backend's canonical representation."""
        payload = self.client.request(self.base_path, method="POST", body=dict(data))
        if not payload:
            raise TransportError(
                f"Create on {self.base_path} returned no record",
                code="UNEXPECTED_RESPONSE",
                details=payload,
            )
        return self._single(payload)

    def update(self, id: RecordId, data: Mapping[str, Any]) -> T:
        """Partially update a record; returns the updated representation."""
        payload = self.client.request(self._record_path(id), method="PUT", body=dict(data))
        return self._single(payload, id)

    def delete(self, id: RecordId) -> None:
        """Delete a record."""
        self.client.request(self._record_path(id), method="DELETE")
        logger.debug("Deleted %s.%s id=%s", self.schema, self.name, id)


class ViewOperations(ReadOperations[T]):
    """Read-only operations for a view."""

    def __init__(self, client: BaseClient, view: ViewMetadata, model: Optional[Type[T]] = None):
        super().__init__(client, view.schema_name, view.name, model=model)
        self.view = view


def build_operations(client: BaseClient, table: Any, model: Optional[Type[T]] = None) -> CrudOperations[T]:
    """Create CRUD operations for a table.

    Args:
        client: Request primitive
        table: TableMetadata or its dict form
        model: Optional pydantic model records are parsed into

    Raises:
        InvalidTableMetadataError: The metadata is missing or malformed
    """
    metadata = _validate_metadata(table, TableMetadata, "table")
    return CrudOperations(client, metadata, model=model)


def build_view_operations(client: BaseClient, view: Any, model: Optional[Type[T]] = None) -> ViewOperations[T]:
    """Create read-only operations for a view."""
    metadata = _validate_metadata(view, ViewMetadata, "view")
    return ViewOperations(client, metadata, model=model)
