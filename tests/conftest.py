"""Shared pytest fixtures for tsforge tests."""

import pytest
from typing import Dict, Any, List

from tsforge.models import SchemaMetadata, TableMetadata
from tests.fixtures import MockRequestClient


@pytest.fixture
def mock_client():
    """Create a fresh MockRequestClient for each test."""
    return MockRequestClient()


@pytest.fixture
def users_table_payload() -> Dict[str, Any]:
    """Backend payload for a public.users table."""
    return {
        "name": "users",
        "schema": "public",
        "columns": [
            {"name": "id", "type": "uuid", "nullable": False, "is_pk": True, "is_enum": False},
            {"name": "email", "type": "varchar(255)", "nullable": True, "is_pk": False, "is_enum": False},
        ],
    }


@pytest.fixture
def users_table(users_table_payload) -> TableMetadata:
    return TableMetadata.model_validate(users_table_payload)


@pytest.fixture
def schemas_payload(users_table_payload) -> List[Dict[str, Any]]:
    """Backend payload of ``GET /dt/schemas`` with two schemas."""
    return [
        {
            "name": "public",
            "tables": {
                "users": users_table_payload,
                "order_items": {
                    "name": "order_items",
                    "schema": "public",
                    "columns": [
                        {"name": "id", "type": "int4", "nullable": False, "is_pk": True},
                        {
                            "name": "user_id",
                            "type": "uuid",
                            "nullable": False,
                            "references": {"schema": "public", "table": "users", "column": "id"},
                        },
                        {"name": "quantity", "type": "INTEGER", "nullable": False},
                        {"name": "price", "type": "numeric(10,2)", "nullable": False},
                        {"name": "tags", "type": "_text", "nullable": True},
                        {"name": "extra", "type": "jsonb", "nullable": True},
                        {"name": "created_at", "type": "timestamp with time zone", "nullable": False},
                    ],
                },
            },
            "views": {
                "users": {
                    "name": "users",
                    "schema": "public",
                    "view_columns": [
                        {"name": "id", "type": "uuid", "nullable": False},
                        {"name": "email", "type": "text", "nullable": True},
                    ],
                },
            },
            "enums": {
                "order_status": {"name": "order_status", "values": ["pending", "shipped", "in transit"]},
            },
            "functions": {
                "calc_total": {
                    "name": "calc_total",
                    "schema": "public",
                    "object_type": "function",
                    "type": "function",
                    "description": None,
                    "parameters": [
                        {"name": "order_id", "type": "integer", "mode": "IN", "has_default": False, "default_value": None},
                    ],
                    "return_type": "numeric",
                    "return_columns": None,
                    "is_strict": True,
                },
            },
            "procedures": {},
            "triggers": {},
        },
        {
            "name": "audit",
            "tables": {},
            "views": {},
            "enums": {},
            "functions": {},
            "procedures": {},
            "triggers": {},
        },
    ]


@pytest.fixture
def sample_schemas(schemas_payload) -> List[SchemaMetadata]:
    """Parsed schemas from ``schemas_payload``."""
    return [SchemaMetadata.model_validate(s) for s in schemas_payload]


@pytest.fixture
def loaded_client(mock_client, schemas_payload) -> MockRequestClient:
    """Mock client answering ``GET /dt/schemas``."""
    mock_client.set_response("GET", "/dt/schemas", schemas_payload)
    return mock_client
