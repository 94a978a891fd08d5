"""Tests for reqport.generator -- client snippets and target dispatch."""

from __future__ import annotations

import pytest

from reqport.exceptions import InvalidUsageError
from reqport.generator import (
    SnippetTarget,
    available_targets,
    generate,
    generate_curl,
    resolve_target,
)
from reqport.generator.snippets import generate_java, generate_javascript, generate_python
from reqport.models import BodyType, KeyValueRow, RequestDescriptor


@pytest.fixture
def json_post() -> RequestDescriptor:
    return RequestDescriptor(
        method="POST",
        url="https://api.example.com/users",
        headers=[
            KeyValueRow(key="Content-Type", value="application/json"),
            KeyValueRow(key="X-Off", value="1", enabled=False),
        ],
        body_type=BodyType.JSON,
        body_content='{"name": "ada"}',
    )


class TestDispatch:
    def test_available_targets(self) -> None:
        assert available_targets() == ["curl", "javascript", "python", "java"]

    @pytest.mark.parametrize("target", ["python", "Python", " PYTHON ", SnippetTarget.PYTHON])
    def test_resolve_target(self, target: object) -> None:
        assert resolve_target(target) == SnippetTarget.PYTHON  # type: ignore[arg-type]

    def test_unknown_target(self) -> None:
        with pytest.raises(InvalidUsageError, match="Unknown target 'cobol'"):
            generate(RequestDescriptor(), "cobol")

    def test_curl_target_delegates(self, json_post: RequestDescriptor) -> None:
        assert generate(json_post, "curl") == generate_curl(json_post)

    @pytest.mark.parametrize("target", ["javascript", "python", "java"])
    def test_disabled_headers_never_emitted(
        self, json_post: RequestDescriptor, target: str
    ) -> None:
        assert "X-Off" not in generate(json_post, target)


class TestJavaScript:
    def test_fetch_with_body(self, json_post: RequestDescriptor) -> None:
        code = generate_javascript(json_post)
        assert 'myHeaders.append("Content-Type", "application/json");' in code
        assert 'method: "POST",' in code
        assert 'body: JSON.stringify({"name": "ada"}),' in code
        assert 'fetch("https://api.example.com/users", requestOptions)' in code

    def test_no_body(self) -> None:
        code = generate_javascript(RequestDescriptor(url="https://x"))
        assert "body:" not in code
        assert 'method: "GET",' in code

    def test_escapes_string_literals(self) -> None:
        request = RequestDescriptor(headers=[KeyValueRow(key="X", value='say "hi"')])
        assert 'myHeaders.append("X", "say \\"hi\\"");' in generate_javascript(request)


class TestPython:
    def test_requests_call(self, json_post: RequestDescriptor) -> None:
        code = generate_python(json_post)
        assert code.startswith("import json\nimport requests\n")
        assert 'url = "https://api.example.com/users"' in code
        assert f"payload = json.dumps({json_post.body_content})" in code
        assert '  "Content-Type": "application/json"' in code
        assert 'requests.request("POST", url, headers=headers, data=payload)' in code

    def test_empty_payload_and_headers(self) -> None:
        code = generate_python(RequestDescriptor(url="https://x"))
        assert "payload = {}" in code
        assert "headers = {\n}" in code

    def test_output_is_valid_python(self, json_post: RequestDescriptor) -> None:
        compile(generate_python(json_post), "<snippet>", "exec")


class TestJava:
    def test_json_body(self, json_post: RequestDescriptor) -> None:
        code = generate_java(json_post)
        assert 'MediaType.parse("application/json")' in code
        assert 'RequestBody.create(mediaType, "{\\"name\\": \\"ada\\"}");' in code
        assert '.method("POST", body)' in code
        assert '.addHeader("Content-Type", "application/json")' in code

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
    def test_empty_body_for_body_methods(self, method: str) -> None:
        code = generate_java(RequestDescriptor(method=method, url="https://x"))
        assert 'MediaType.parse("text/plain")' in code
        assert 'RequestBody.create(mediaType, "");' in code
        assert f'.method("{method}", body)' in code

    def test_get_has_null_body(self) -> None:
        code = generate_java(RequestDescriptor(url="https://x"))
        assert "RequestBody" not in code
        assert '.method("GET", null)' in code
