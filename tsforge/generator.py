"""TypeScript type generator for schema metadata."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .errors import GenerationError
from .models import EnumInfo, SchemaMetadata, TableMetadata, ViewMetadata
from .type_mappers import PostgresTypeMapper, TypeMapper

logger = logging.getLogger(__name__)

INDEX_FILE = "index.ts"
JSON_FILE = "metadata.json"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
# Strings TypeScript reads as numeric member names: canonical numbers, Infinity, NaN
_NUMERIC_NAME_RE = re.compile(r"^(-?(0|[1-9]\d*)(\.\d*[1-9])?|-?Infinity|NaN)$")


@dataclass(frozen=True)
class GeneratedFile:
    """A generated artifact, path relative to the output directory."""
    path: str
    content: str


def to_pascal_case(name: str) -> str:
    """Convert a snake_case name to PascalCase.

    >>> to_pascal_case("user_profile_settings")
    'UserProfileSettings'
    """
    return "".join(word[:1].upper() + word[1:] for word in name.split("_"))


def schema_file_name(schema_name: str) -> str:
    """Name of the generated file for a schema."""
    return f"types-{schema_name}.ts"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    escaped = escaped.replace("\n", "\\n").replace("\r", "\\r")
    return f"'{escaped}'"


def _property_key(name: str) -> str:
    """Column names that are not identifiers become quoted keys."""
    return name if _IDENTIFIER_RE.match(name) else _quote(name)


def _enum_member(value: str) -> str:
    """Member name for an enum value; numeric names get a ``_`` prefix."""
    if _NUMERIC_NAME_RE.match(value):
        value = f"_{value}"
    return _property_key(value)


class TypeGenerator:
    """Generates TypeScript definitions from schema metadata.

    Output is deterministic: schemas keep the order they are given in, and
    tables, views and enums are emitted sorted by name. Nothing is written
    to disk here; see ``tsforge.writer``.
    """

    def __init__(
        self,
        type_mapper: Optional[TypeMapper] = None,
        include_query_params: bool = False,
        indent: str = "  ",
    ):
        self.type_mapper = type_mapper or PostgresTypeMapper()
        self.include_query_params = include_query_params
        self.indent = indent

    def _property_line(self, name: str, raw_type: str, optional: bool) -> str:
        target = self.type_mapper.to_target_type(raw_type)
        marker = "?" if optional else ""
        line = f"{self.indent}{_property_key(name)}{marker}: {target.to_typescript()};"
        if target.is_unknown:
            line += f" // unknown type: {raw_type}"
        return line

    def generate_table_interface(self, table: TableMetadata) -> str:
        """Generate the interface for a table; nullable columns are optional."""
        lines = [f"export interface {to_pascal_case(table.name)} {{"]
        for column in table.columns:
            lines.append(self._property_line(column.name, column.type, column.nullable))
        lines.append("}")
        return "\n".join(lines)

    def generate_view_interface(self, view: ViewMetadata) -> str:
        """Generate the interface for a view, suffixed with ``View``."""
        lines = [f"export interface {to_pascal_case(view.name)}View {{"]
        for column in view.view_columns:
            lines.append(self._property_line(column.name, column.type, column.nullable))
        lines.append("}")
        return "\n".join(lines)

    def generate_query_interface(self, table: TableMetadata) -> str:
        """Generate a query params interface for a table (every key optional)."""
        lines = [f"export interface {to_pascal_case(table.name)}QueryParams {{"]
        for column in table.columns:
            lines.append(self._property_line(column.name, column.type, True))
        lines.append("}")
        return "\n".join(lines)

    def generate_enum(self, enum_info: EnumInfo) -> str:
        """Generate a string enum whose members carry their own name as value.

        TypeScript rejects numeric member names, so values such as ``'1'``
        become ``_1 = '1'``.

        Raises:
            GenerationError: Two values produce the same member name
        """
        lines = [f"export enum {to_pascal_case(enum_info.name)} {{"]
        members: Dict[str, str] = {}
        for value in enum_info.values:
            member = _enum_member(value)
            if member in members:
                raise GenerationError(
                    f"Enum '{enum_info.name}': values {members[member]!r} and {value!r} "
                    f"both generate member {member}",
                    details={"enum": enum_info.name, "member": member,
                             "values": [members[member], value]},
                )
            members[member] = value
            lines.append(f"{self.indent}{member} = {_quote(value)},")
        lines.append("}")
        return "\n".join(lines)

    def _identifiers(self, schema: SchemaMetadata) -> List[Tuple[str, str]]:
        """(identifier, source) pairs for everything emitted for a schema."""
        pairs = []
        for name in sorted(schema.tables):
            pairs.append((to_pascal_case(name), f"table {schema.name}.{name}"))
            if self.include_query_params:
                pairs.append((f"{to_pascal_case(name)}QueryParams", f"query params of {schema.name}.{name}"))
        for name in sorted(schema.views):
            pairs.append((f"{to_pascal_case(name)}View", f"view {schema.name}.{name}"))
        for name in sorted(schema.enums):
            pairs.append((to_pascal_case(name), f"enum {schema.name}.{name}"))
        return pairs

    def check_collisions(self, schema: SchemaMetadata) -> Set[str]:
        """Return the identifiers of a schema, failing on duplicates.

        Raises:
            GenerationError: Two distinct objects map to one identifier
        """
        owners: Dict[str, str] = {}
        for identifier, source in self._identifiers(schema):
            if identifier in owners:
                raise GenerationError(
                    f"Identifier collision in schema '{schema.name}': "
                    f"{owners[identifier]} and {source} both generate '{identifier}'",
                    details={"schema": schema.name, "identifier": identifier,
                             "sources": [owners[identifier], source]},
                )
            owners[identifier] = source
        return set(owners)

    def generate_schema(self, schema: SchemaMetadata) -> GeneratedFile:
        """Generate the type file for one schema."""
        self.check_collisions(schema)

        blocks = []
        for name in sorted(schema.tables):
            table = schema.tables[name]
            blocks.append(self.generate_table_interface(table))
            if self.include_query_params:
                blocks.append(self.generate_query_interface(table))
        for name in sorted(schema.views):
            blocks.append(self.generate_view_interface(schema.views[name]))
        for name in sorted(schema.enums):
            blocks.append(self.generate_enum(schema.enums[name]))

        content = f"// Generated types for schema: {schema.name}\n"
        if blocks:
            content += "\n" + "\n\n".join(blocks) + "\n"

        logger.debug("Gen types for: %s (%d definitions)", schema.name, len(blocks))
        return GeneratedFile(path=schema_file_name(schema.name), content=content)

    def generate_index(self, schemas: Sequence[SchemaMetadata]) -> GeneratedFile:
        """Generate the index re-exporting every schema file.

        A schema whose identifiers clash with an earlier schema's, or with a
        namespace already emitted, is re-exported under its PascalCase
        schema name as a namespace.
        """
        exported: Set[str] = set()
        namespaces: Set[str] = set()
        lines = []

        for schema in schemas:
            module = f"./{schema_file_name(schema.name)[:-3]}"
            identifiers = self.check_collisions(schema)
            clashes = identifiers & (exported | namespaces)

            if not clashes:
                exported |= identifiers
                lines.append(f"export * from '{module}';")
                continue

            namespace = to_pascal_case(schema.name)
            if namespace in exported or namespace in namespaces:
                raise GenerationError(
                    f"Cannot namespace schema '{schema.name}': '{namespace}' is already exported",
                    details={"schema": schema.name, "namespace": namespace},
                )
            logger.warning(
                "Schema '%s' redefines %s; exporting it as namespace %s",
                schema.name, ", ".join(sorted(clashes)), namespace,
            )
            namespaces.add(namespace)
            lines.append(f"export * as {namespace} from '{module}';")

        if not lines:
            lines.append("export {};")
        return GeneratedFile(path=INDEX_FILE, content="\n".join(lines) + "\n")

    def generate(self, schemas: Sequence[SchemaMetadata]) -> List[GeneratedFile]:
        """Generate one file per schema followed by the index file.

        Raises:
            GenerationError: A schema contains an identifier collision
        """
        files = [self.generate_schema(schema) for schema in schemas]
        files.append(self.generate_index(schemas))
        return files

    def generate_json(self, schemas: Sequence[SchemaMetadata]) -> GeneratedFile:
        """Dump the metadata snapshot using the backend's field names."""
        data = [schema.model_dump(mode="json", by_alias=True) for schema in schemas]
        return GeneratedFile(path=JSON_FILE, content=json.dumps(data, indent="\t") + "\n")
