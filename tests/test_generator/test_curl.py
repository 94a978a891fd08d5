"""Tests for reqport.generator.shell -- curl command generation."""

from __future__ import annotations

from reqport.generator.shell import generate_curl, quote_posix
from reqport.models import BodyType, KeyValueRow, RequestDescriptor


class TestGenerateCurl:
    def test_exact_output(self) -> None:
        request = RequestDescriptor(
            method="POST",
            url="https://api.example.com/users",
            headers=[KeyValueRow(key="Content-Type", value="application/json")],
            body_type=BodyType.JSON,
            body_content='{"name": "ada"}',
        )
        assert generate_curl(request) == (
            "curl --location --request POST 'https://api.example.com/users' \\\n"
            "--header 'Content-Type: application/json' \\\n"
            "--data-raw '{\"name\": \"ada\"}'"
        )

    def test_single_line(self) -> None:
        request = RequestDescriptor(url="https://x", headers=[KeyValueRow(key="A", value="1")])
        assert generate_curl(request, multiline=False) == (
            "curl --location --request GET 'https://x' --header 'A: 1'"
        )

    def test_skips_disabled_and_blank_headers(
        self, create_user_request: RequestDescriptor
    ) -> None:
        request = create_user_request.model_copy(
            update={
                "headers": (
                    *create_user_request.headers,
                    KeyValueRow(key="  ", value="blank"),
                )
            }
        )
        command = generate_curl(request)
        assert "X-Trace" not in command
        assert "blank" not in command
        assert command.count("--header") == 2

    def test_query_params_are_not_appended(
        self, create_user_request: RequestDescriptor
    ) -> None:
        assert "notify" not in generate_curl(create_user_request)

    def test_escapes_single_quotes_in_body(self) -> None:
        request = RequestDescriptor(body_type=BodyType.JSON, body_content="{\"n\": \"O'Brien\"}")
        assert "--data-raw '{\"n\": \"O'\\''Brien\"}'" in generate_curl(request)

    def test_non_json_body_is_not_emitted(self) -> None:
        request = RequestDescriptor(body_type=BodyType.URLENCODED, body_content="a=1")
        assert "--data-raw" not in generate_curl(request)

    def test_empty_request(self) -> None:
        assert generate_curl(RequestDescriptor()) == "curl --location --request GET ''"


class TestQuotePosix:
    def test_quote(self) -> None:
        assert quote_posix("it's") == "it'\\''s"

    def test_no_quote(self) -> None:
        assert quote_posix('{"a": 1}') == '{"a": 1}'
