"""Tests for reqport.parser.openapi -- one request per API operation."""

from __future__ import annotations

from typing import Any

import pytest

from reqport.exceptions import DecodeError
from reqport.models import BodyType, HTTPMethod
from reqport.parser.openapi import import_spec


class TestImportSpec:
    def test_one_request_per_operation_in_order(self, petstore_raw: dict[str, Any]) -> None:
        imported = import_spec(petstore_raw)
        assert [(i.request.method, i.title) for i in imported] == [
            (HTTPMethod.GET, "List pets"),
            (HTTPMethod.POST, "createPet"),
            (HTTPMethod.GET, "GET /pets/{petId}"),
            (HTTPMethod.DELETE, "Delete a pet"),
        ]

    def test_url_uses_first_server(self, petstore_raw: dict[str, Any]) -> None:
        urls = [i.request.url for i in import_spec(petstore_raw)]
        assert urls[0] == "https://petstore.example.com/v1/pets"
        assert urls[2] == "https://petstore.example.com/v1/pets/{petId}"

    def test_parameters_by_location(self, petstore_raw: dict[str, Any]) -> None:
        list_pets = import_spec(petstore_raw)[0].request
        assert [(q.key, q.description) for q in list_pets.query_params] == [
            ("limit", "How many items to return")
        ]
        assert [(h.key, h.description) for h in list_pets.headers] == [
            ("X-Request-Id", "Correlation id")
        ]
        assert all(q.value == "" and q.enabled for q in list_pets.query_params)

    def test_path_level_parameters_come_first(self, petstore_raw: dict[str, Any]) -> None:
        get_pet = import_spec(petstore_raw)[2].request
        assert [h.key for h in get_pet.headers] == ["X-Tenant"]
        assert [q.key for q in get_pet.query_params] == ["fields"]

    def test_json_request_body_placeholder(self, petstore_raw: dict[str, Any]) -> None:
        create = import_spec(petstore_raw)[1].request
        assert create.body_type == BodyType.JSON
        assert create.body_content == "{}"

    def test_non_json_request_body_ignored(self, petstore_raw: dict[str, Any]) -> None:
        delete = import_spec(petstore_raw)[3].request
        assert delete.body_type == BodyType.NONE
        assert delete.body_content == ""

    def test_tags_copied(self, petstore_raw: dict[str, Any]) -> None:
        create = import_spec(petstore_raw)[1].request
        assert create.tags == frozenset({"pets", "write"})

    def test_title_is_copied_onto_request(self, petstore_raw: dict[str, Any]) -> None:
        assert all(i.request.title == i.title for i in import_spec(petstore_raw))

    def test_without_servers(self) -> None:
        [item] = import_spec({"paths": {"/a": {"get": {}}}})
        assert item.request.url == "/a"
        assert item.title == "GET /a"

    def test_no_slash_deduplication(self) -> None:
        doc = {"servers": [{"url": "https://x/"}], "paths": {"/a": {"get": {}}}}
        assert import_spec(doc)[0].request.url == "https://x//a"

    def test_duplicate_parameter_names_kept(self) -> None:
        doc = {
            "paths": {
                "/a": {
                    "parameters": [{"name": "q", "in": "query"}],
                    "get": {"parameters": [{"name": "q", "in": "query"}]},
                }
            }
        }
        assert [q.key for q in import_spec(doc)[0].request.query_params] == ["q", "q"]

    def test_empty_document(self) -> None:
        assert import_spec({}) == []


class TestImportSpecErrors:
    @pytest.mark.parametrize(
        "doc",
        [
            {"paths": []},
            {"paths": {"/a": {"get": "nope"}}},
            {"paths": {"/a": {"get": {"parameters": "nope"}}}},
            {"paths": {"/a": {"get": {"parameters": [{"$ref": "#/missing"}]}}}},
            {"paths": {"/a": {"get": {"parameters": [{"$ref": "other.yaml#/p"}]}}}},
        ],
    )
    def test_malformed_documents_raise(self, doc: dict[str, Any]) -> None:
        with pytest.raises(DecodeError):
            import_spec(doc)

    def test_non_mapping_raises(self) -> None:
        with pytest.raises(DecodeError, match="must be an object"):
            import_spec("openapi: 3.0.0")  # type: ignore[arg-type]
