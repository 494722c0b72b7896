"""Tests for MetadataClient and HealthClient."""

import pytest

from tsforge.errors import InvalidInputError, TransportError
from tsforge.health import HealthClient
from tsforge.metadata import MetadataClient


class TestFetchSchemas:
    """Test the nested ``/dt/schemas`` fetch."""

    def test_fetch_all(self, loaded_client):
        schemas = MetadataClient(loaded_client).fetch_schemas()

        assert [s.name for s in schemas] == ["public", "audit"]
        call = loaded_client.last_call()
        assert call["method"] == "GET"
        assert call["path"] == "/dt/schemas"
        assert call["params"] is None

    def test_fetch_selected_passes_schemas_param(self, loaded_client):
        schemas = MetadataClient(loaded_client).fetch_schemas(["audit"])

        assert [s.name for s in schemas] == ["audit"]
        assert loaded_client.last_call()["params"] == {"schemas": "audit"}

    def test_multiple_schemas_are_comma_joined(self, loaded_client):
        MetadataClient(loaded_client).fetch_schemas(["public", "audit"])
        assert loaded_client.last_call()["params"] == {"schemas": "public,audit"}

    def test_missing_schema_is_logged(self, loaded_client, caplog):
        schemas = MetadataClient(loaded_client).fetch_schemas(["public", "sales"])

        assert [s.name for s in schemas] == ["public"]
        assert "sales" in caplog.text

    def test_404_means_no_schemas(self, mock_client):
        assert MetadataClient(mock_client).fetch_schemas() == []

    def test_single_request(self, loaded_client):
        MetadataClient(loaded_client).fetch_schemas()
        assert loaded_client.call_count == 1

    def test_transport_error_propagates(self, mock_client):
        mock_client.set_response("GET", "/dt/schemas", TransportError("boom", status=500))
        with pytest.raises(TransportError):
            MetadataClient(mock_client).fetch_schemas()

    def test_malformed_payload(self, mock_client):
        mock_client.set_response("GET", "/dt/schemas", "not a list")
        with pytest.raises(InvalidInputError):
            MetadataClient(mock_client).fetch_schemas()

    def test_invalid_schema_entry(self, mock_client):
        mock_client.set_response("GET", "/dt/schemas", [{"tables": {}}])
        with pytest.raises(InvalidInputError, match="Malformed schema metadata"):
            MetadataClient(mock_client).fetch_schemas()


class TestPerCategory:
    """Test the per-category endpoints."""

    def test_get_tables(self, mock_client, users_table_payload):
        mock_client.set_response("GET", "/dt/public/tables", [users_table_payload])
        tables = MetadataClient(mock_client).get_tables("public")

        assert [t.name for t in tables] == ["users"]
        assert tables[0].primary_key == "id"

    def test_get_enums_from_keyed_map(self, mock_client):
        mock_client.set_response("GET", "/dt/public/enums", {
            "mood": {"name": "mood", "values": ["ok", "sad"]},
        })
        enums = MetadataClient(mock_client).get_enums("public")
        assert enums[0].values == ["ok", "sad"]

    @pytest.mark.parametrize("method,path", [
        ("get_tables", "/dt/public/tables"),
        ("get_views", "/dt/public/views"),
        ("get_enums", "/dt/public/enums"),
        ("get_functions", "/dt/public/functions"),
        ("get_procedures", "/dt/public/procedures"),
        ("get_triggers", "/dt/public/triggers"),
    ])
    def test_missing_endpoint_is_empty(self, mock_client, method, path):
        """Test that a 404 on optional metadata yields an empty list."""
        result = getattr(MetadataClient(mock_client), method)("public")

        assert result == []
        assert mock_client.last_call()["path"] == path

    def test_get_triggers(self, mock_client):
        mock_client.set_response("GET", "/dt/public/triggers", [
            {"name": "audit_insert", "schema": "public", "object_type": "TRIGGER"},
        ])
        triggers = MetadataClient(mock_client).get_triggers("public")
        assert triggers[0].object_type == "trigger"


class TestHealthClient:
    """Test health pass-through."""

    def test_check_health(self, mock_client):
        mock_client.set_response("GET", "/health", {"status": "healthy", "version": "1.2.0", "uptime": 12.5})
        status = HealthClient(mock_client).check_health()

        assert status.status == "healthy"
        assert status.version == "1.2.0"

    def test_check_ping(self, mock_client):
        mock_client.set_response("GET", "/health/ping", "pong")
        assert HealthClient(mock_client).check_ping() == "pong"

    def test_check_cache(self, mock_client):
        mock_client.set_response("GET", "/health/cache", {"total_items": 4, "tables_cached": 2})
        cache = HealthClient(mock_client).check_cache()

        assert cache.total_items == 4
        assert cache.tables_cached == 2
        assert cache.views_cached == 0

    def test_clear_cache_posts(self, mock_client):
        mock_client.set_response("POST", "/health/clear-cache", {"status": "ok", "message": "cleared"})
        result = HealthClient(mock_client).clear_cache()

        assert result.message == "cleared"
        assert mock_client.last_call()["method"] == "POST"
