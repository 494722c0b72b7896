"""Schema metadata retrieval from the ``/dt`` endpoints."""

import logging
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from .base_client import BaseClient
from .errors import InvalidInputError, NotFoundError
from .models import EnumInfo, FunctionMetadata, SchemaMetadata, TableMetadata, ViewMetadata

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse_list(model: Callable[..., M], payload: Any, what: str) -> List[M]:
    if payload is None:
        return []
    if isinstance(payload, dict):
        # Some endpoints answer with a name-keyed map instead of an array
        payload = list(payload.values())
    if not isinstance(payload, list):
        raise InvalidInputError(f"Unexpected {what} payload: expected a list, got {type(payload).__name__}")
    try:
        return [model.model_validate(item) for item in payload]
    except ValidationError as e:
        raise InvalidInputError(f"Malformed {what} metadata", details=e.errors()) from e


class MetadataClient:
    """Fetches and normalizes schema metadata.

    Usage:
        with BaseClient("http://localhost:8000") as client:
            schemas = MetadataClient(client).fetch_schemas(["public"])
    """

    def __init__(self, client: BaseClient):
        self.client = client

    def _get_optional(self, path: str, **kwargs) -> Any:
        """GET an optional-metadata endpoint; a 404 means nothing to report."""
        try:
            return self.client.request(path, method="GET", **kwargs)
        except NotFoundError:
            logger.debug("%s returned 404, treating as empty", path)
            return None

    def fetch_schemas(self, schema_names: Optional[Sequence[str]] = None) -> List[SchemaMetadata]:
        """Fetch the full nested metadata for the given schemas in one request.

        Args:
            schema_names: Schemas to fetch; every schema when omitted

        Returns:
            SchemaMetadata list in the order the backend returned them
        """
        params = {"schemas": ",".join(schema_names)} if schema_names else None
        payload = self._get_optional("/dt/schemas", params=params)
        schemas = _parse_list(SchemaMetadata, payload, "schema")

        if schema_names:
            wanted = set(schema_names)
            schemas = [s for s in schemas if s.name in wanted]
            missing = wanted - {s.name for s in schemas}
            if missing:
                logger.warning("Schemas not reported by the backend: %s", ", ".join(sorted(missing)))

        logger.debug("Fetched %d schema(s)", len(schemas))
        return schemas

    # Tables, views, enums
    def get_tables(self, schema: str) -> List[TableMetadata]:
        return _parse_list(TableMetadata, self._get_optional(f"/dt/{schema}/tables"), "table")

    def get_views(self, schema: str) -> List[ViewMetadata]:
        return _parse_list(ViewMetadata, self._get_optional(f"/dt/{schema}/views"), "view")

    def get_enums(self, schema: str) -> List[EnumInfo]:
        return _parse_list(EnumInfo, self._get_optional(f"/dt/{schema}/enums"), "enum")

    # Functions, procedures, triggers
    def get_functions(self, schema: str) -> List[FunctionMetadata]:
        return _parse_list(FunctionMetadata, self._get_optional(f"/dt/{schema}/functions"), "function")

    def get_procedures(self, schema: str) -> List[FunctionMetadata]:
        return _parse_list(FunctionMetadata, self._get_optional(f"/dt/{schema}/procedures"), "procedure")

    def get_triggers(self, schema: str) -> List[FunctionMetadata]:
        return _parse_list(FunctionMetadata, self._get_optional(f"/dt/{schema}/triggers"), "trigger")
