"""The tsforge facade: metadata, lookups, CRUD, health and generation."""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Type, TypeVar, Union

from .base_client import BaseClient, create_base_client
from .config import settings
from .crud import CrudOperations, ViewOperations
from .generator import TypeGenerator
from .health import HealthClient
from .metadata import MetadataClient
from .models import (
    CacheStatus,
    ClearCacheResult,
    EnumInfo,
    FunctionMetadata,
    HealthStatus,
    MetadataSnapshot,
    SchemaMetadata,
    TableMetadata,
    ViewMetadata,
)
from .operators import SchemaOperators
from .writer import remove_dir, write_files

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Forge:
    """Client for a database REST API.

    Schema metadata is fetched on first use and kept as an immutable
    snapshot; every lookup waits for that first load. ``refresh()`` fetches
    a new snapshot and swaps it in whole.

    Usage:
        with Forge("http://localhost:8000") as forge:
            users = forge.get_table_operations("public", "users")
            active = users.find_many({"where": {"active": True}, "limit": 10})
            forge.gen_ts("src/gen")
    """

    def __init__(
        self,
        base_client_or_url: Union[str, BaseClient, None] = None,
        schemas: Optional[Sequence[str]] = None,
        generator: Optional[TypeGenerator] = None,
    ):
        self.base_client = create_base_client(base_client_or_url)
        self.schema_names = list(schemas) if schemas is not None else settings.schemas
        self.metadata = MetadataClient(self.base_client)
        self.health = HealthClient(self.base_client)
        self.generator = generator or TypeGenerator()
        self._state: Optional[Tuple[MetadataSnapshot, SchemaOperators]] = None
        self._lock = threading.Lock()

    def close(self):
        self.base_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Metadata snapshot
    def _load(self) -> Tuple[MetadataSnapshot, SchemaOperators]:
        logger.info("Loading schema metadata from %s", self.base_client.base_url)
        schemas = self.metadata.fetch_schemas(self.schema_names)
        snapshot = MetadataSnapshot(schemas=tuple(schemas))
        logger.info("Loaded schemas: %s", ", ".join(snapshot.schema_names) or "(none)")
        return snapshot, SchemaOperators(self.base_client, snapshot.schemas)

    def _current(self) -> Tuple[MetadataSnapshot, SchemaOperators]:
        state = self._state
        if state is None:
            with self._lock:
                if self._state is None:
                    self._state = self._load()
                state = self._state
        return state

    @property
    def is_loaded(self) -> bool:
        return self._state is not None

    @property
    def snapshot(self) -> MetadataSnapshot:
        return self._current()[0]

    @property
    def schemas(self) -> Tuple[SchemaMetadata, ...]:
        return self.snapshot.schemas

    @property
    def ops(self) -> SchemaOperators:
        return self._current()[1]

    def refresh(self) -> MetadataSnapshot:
        """Refetch all metadata and replace the snapshot."""
        state = self._load()
        with self._lock:
            self._state = state
        return state[0]

    # Lookups
    def get_schema(self, name: str) -> Optional[SchemaMetadata]:
        return self.ops.get_schema(name)

    def get_table(self, schema_name: str, table_name: str) -> Optional[TableMetadata]:
        return self.ops.get_table(schema_name, table_name)

    def get_view(self, schema_name: str, view_name: str) -> Optional[ViewMetadata]:
        return self.ops.get_view(schema_name, view_name)

    def get_enum(self, schema_name: str, enum_name: str) -> Optional[EnumInfo]:
        return self.ops.get_enum(schema_name, enum_name)

    def get_function(self, schema_name: str, func_name: str) -> Optional[FunctionMetadata]:
        return self.ops.get_function(schema_name, func_name)

    def get_table_operations(
        self, schema_name: str, table_name: str, model: Optional[Type[T]] = None
    ) -> CrudOperations[T]:
        return self.ops.get_table_operations(schema_name, table_name, model=model)

    def get_view_operations(
        self, schema_name: str, view_name: str, model: Optional[Type[T]] = None
    ) -> ViewOperations[T]:
        return self.ops.get_view_operations(schema_name, view_name, model=model)

    # Health API
    def check_health(self) -> HealthStatus:
        return self.health.check_health()

    def check_ping(self) -> str:
        return self.health.check_ping()

    def check_cache(self) -> CacheStatus:
        return self.health.check_cache()

    def clear_cache(self) -> ClearCacheResult:
        return self.health.clear_cache()

    # Generators
    def gen_ts(self, output_dir: Union[str, Path, None] = None, clean: bool = False) -> List[Path]:
        """Generate TypeScript types for every loaded schema and write them.

        Generation happens in memory first, so a collision error leaves the
        output directory untouched even with ``clean``.
        """
        target = output_dir or settings.output_dir
        files = self.generator.generate(self.schemas)
        if clean:
            remove_dir(target)
        written = write_files(files, target)
        logger.info("Generated %d file(s) in %s", len(written), target)
        return written

    def gen_json(self, output_dir: Union[str, Path, None] = None) -> Path:
        """Write the metadata snapshot as JSON."""
        generated = self.generator.generate_json(self.schemas)
        return write_files([generated], output_dir or settings.output_dir)[0]
