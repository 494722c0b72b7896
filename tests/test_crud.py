"""Tests for generic CRUD operations."""

import json
from typing import Optional

import pytest
from pydantic import BaseModel

from tsforge.crud import (
    CrudOperations,
    FilterOptions,
    ViewOperations,
    build_operations,
    build_view_operations,
    transform_filter_to_params,
)
from tsforge.errors import (
    ForgeError,
    InvalidInputError,
    InvalidTableMetadataError,
    NotFoundError,
    TransportError,
)


class User(BaseModel):
    id: str
    email: Optional[str] = None


@pytest.fixture
def users_ops(mock_client, users_table):
    return build_operations(mock_client, users_table)


class TestTransformFilter:
    """Test filter to query parameter encoding."""

    def test_empty(self):
        assert transform_filter_to_params() == {}
        assert transform_filter_to_params({}) == {}

    def test_limit_offset(self):
        assert transform_filter_to_params({"limit": 10, "offset": 5}) == {"limit": "10", "offset": "5"}

    def test_zero_limit_is_kept(self):
        assert transform_filter_to_params({"limit": 0}) == {"limit": "0"}

    def test_where_and_order_by_are_json(self):
        params = transform_filter_to_params({
            "where": {"status": "active", "age": {"gt": 18}},
            "order_by": {"created_at": "desc"},
        })

        assert json.loads(params["where"]) == {"status": "active", "age": {"gt": 18}}
        assert json.loads(params["order_by"]) == {"created_at": "desc"}
        assert "limit" not in params

    def test_order_by_camel_case_alias(self):
        params = transform_filter_to_params({"orderBy": {"name": "asc"}})
        assert json.loads(params["order_by"]) == {"name": "asc"}

    def test_filter_options_instance(self):
        options = FilterOptions(where={"id": 1}, limit=1)
        assert transform_filter_to_params(options) == {"where": '{"id": 1}', "limit": "1"}

    @pytest.mark.parametrize("bad_filter", [
        {"limit": -1},
        {"offset": "many"},
        {"order_by": {"name": "sideways"}},
    ])
    def test_invalid_filter(self, bad_filter):
        with pytest.raises(InvalidInputError):
            transform_filter_to_params(bad_filter)


class TestBuildOperations:
    """Test the CRUD factory."""

    @pytest.mark.parametrize("metadata", [
        None,
        {"name": None},
        {"name": "users"},
        {"name": "", "schema": "public"},
        {"name": "users", "schema": "  "},
        "public.users",
    ])
    def test_invalid_metadata_fails_before_io(self, mock_client, metadata):
        with pytest.raises(InvalidTableMetadataError) as exc_info:
            build_operations(mock_client, metadata)

        assert exc_info.value.code == "INVALID_TABLE_METADATA"
        assert isinstance(exc_info.value, InvalidInputError)
        assert mock_client.call_count == 0

    def test_accepts_dict(self, mock_client, users_table_payload):
        ops = build_operations(mock_client, users_table_payload)

        assert isinstance(ops, CrudOperations)
        assert ops.base_path == "/public/users"
        assert ops.primary_key == "id"
        assert mock_client.call_count == 0

    def test_path_segments_are_escaped(self, mock_client):
        ops = build_operations(mock_client, {"name": "my table", "schema": "public"})
        assert ops.base_path == "/public/my%20table"


class TestReads:
    """Test collection and single-record reads."""

    def test_find_all(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users", [{"id": "a"}, {"id": "b"}])

        assert users_ops.find_all() == [{"id": "a"}, {"id": "b"}]
        assert mock_client.last_call()["params"] == {}

    def test_find_all_with_filter(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users", [])
        users_ops.find_all({"where": {"email": "x@y.z"}, "limit": 1})

        params = mock_client.last_call()["params"]
        assert json.loads(params["where"]) == {"email": "x@y.z"}
        assert params["limit"] == "1"

    def test_find_all_empty_on_404(self, users_ops):
        assert users_ops.find_all() == []

    def test_find_all_empty_body(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users", None)
        assert users_ops.find_all() == []

    def test_find_all_unexpected_shape(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users", {"rows": []})
        with pytest.raises(TransportError) as exc_info:
            users_ops.find_all()
        assert exc_info.value.code == "UNEXPECTED_RESPONSE"

    def test_find_many_requires_filter(self, mock_client, users_ops):
        with pytest.raises(InvalidInputError):
            users_ops.find_many(None)
        assert mock_client.call_count == 0

    def test_find_many(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users", [{"id": "a"}])
        assert users_ops.find_many({"where": {"id": "a"}}) == [{"id": "a"}]

    def test_find_one(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users/abc", {"id": "abc", "email": None})

        assert users_ops.find_one("abc") == {"id": "abc", "email": None}
        assert mock_client.last_call()["path"] == "/public/users/abc"

    def test_find_one_unwraps_single_row_list(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users/abc", [{"id": "abc"}])
        assert users_ops.find_one("abc") == {"id": "abc"}

    def test_find_one_ambiguous(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users/abc", [{"id": "abc"}, {"id": "abc"}])
        with pytest.raises(ForgeError) as exc_info:
            users_ops.find_one("abc")
        assert exc_info.value.code == "AMBIGUOUS_RESULT"

    def test_find_one_not_found(self, users_ops):
        """Test that a missing record raises NOT_FOUND."""
        with pytest.raises(NotFoundError) as exc_info:
            users_ops.find_one("999")

        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.details["id"] == "999"

    def test_find_one_empty_list(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users/999", [])
        with pytest.raises(NotFoundError):
            users_ops.find_one("999")

    def test_find_one_integer_id(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users/42", {"id": "42"})
        users_ops.find_one(42)
        assert mock_client.last_call()["path"] == "/public/users/42"

    def test_model_parsing(self, mock_client, users_table):
        ops = build_operations(mock_client, users_table, model=User)
        mock_client.set_response("GET", "/public/users", [{"id": "a", "email": "a@x.io"}])

        users = ops.find_all()
        assert isinstance(users[0], User)
        assert users[0].email == "a@x.io"


class TestCount:
    """Test count responses."""

    @pytest.mark.parametrize("payload,expected", [
        ({"count": 3}, 3),
        (7, 7),
        ("12", 12),
        ({"count": "0"}, 0),
    ])
    def test_count_shapes(self, mock_client, users_ops, payload, expected):
        mock_client.set_response("GET", "/public/users", payload)

        assert users_ops.count() == expected
        assert mock_client.last_call()["params"] == {"count": "true"}

    def test_count_with_filter(self, mock_client, users_ops):
        mock_client.set_response("GET", "/public/users", {"count": 1})
        users_ops.count({"where": {"id": "a"}})

        params = mock_client.last_call()["params"]
        assert params["count"] == "true"
        assert "where" in params

    @pytest.mark.parametrize("payload", [[{"id": 1}], {"total": 2}, "lots", True])
    def test_count_unexpected(self, mock_client, users_ops, payload):
        mock_client.set_response("GET", "/public/users", payload)
        with pytest.raises(TransportError) as exc_info:
            users_ops.count()
        assert exc_info.value.code == "UNEXPECTED_RESPONSE"


class TestWrites:
    """Test create, update and delete."""

    def test_create(self, mock_client, users_ops):
        mock_client.set_response("POST", "/public/users", {"id": "new", "email": "n@x.io"})

        created = users_ops.create({"email": "n@x.io"})

        assert created == {"id": "new", "email": "n@x.io"}
        call = mock_client.last_call()
        assert call["path"] == "/public/users"
        assert call["body"] == {"email": "n@x.io"}

    @pytest.mark.parametrize("payload", [None, {}, []])
    def test_create_empty_response(self, mock_client, users_ops, payload):
        """Test that a write answered with no body is not reported as NOT_FOUND."""
        mock_client.set_response("POST", "/public/users", payload)

        with pytest.raises(TransportError) as exc_info:
            users_ops.create({"email": "n@x.io"})

        assert exc_info.value.code == "UNEXPECTED_RESPONSE"
        assert not isinstance(exc_info.value, NotFoundError)

    def test_update(self, mock_client, users_ops):
        mock_client.set_response("PUT", "/public/users/abc", lambda params, body: {"id": "abc", **body})

        updated = users_ops.update("abc", {"email": "new@x.io"})

        assert updated == {"id": "abc", "email": "new@x.io"}
        assert mock_client.last_call()["method"] == "PUT"

    def test_update_missing_record(self, users_ops):
        with pytest.raises(NotFoundError):
            users_ops.update("999", {"email": "x"})

    def test_delete(self, mock_client, users_ops):
        mock_client.set_response("DELETE", "/public/users/abc", None)

        assert users_ops.delete("abc") is None
        assert mock_client.calls_to("DELETE", "/public/users/abc")

    def test_delete_missing_record_propagates(self, users_ops):
        with pytest.raises(NotFoundError):
            users_ops.delete("999")

    def test_transport_error_propagates(self, mock_client, users_ops):
        mock_client.set_response("POST", "/public/users", TransportError("bad", status=400))
        with pytest.raises(TransportError):
            users_ops.create({})


class TestViewOperations:
    """Test read-only view operations."""

    def test_view_reads(self, mock_client, sample_schemas):
        ops = build_view_operations(mock_client, sample_schemas[0].views["users"])
        mock_client.set_response("GET", "/public/users", [{"id": "a"}])

        assert isinstance(ops, ViewOperations)
        assert ops.find_all() == [{"id": "a"}]
        assert not hasattr(ops, "create")
        assert not hasattr(ops, "delete")

    def test_invalid_view_metadata(self, mock_client):
        with pytest.raises(InvalidTableMetadataError):
            build_view_operations(mock_client, {"name": "v"})
