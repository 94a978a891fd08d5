"""Client code snippets for JavaScript, Python, and Java.

Every target shares the same preprocessing: enabled headers with a non-blank
key become an ordered ``key -> value`` mapping, and a body is embedded only
when the request carries non-empty JSON content. Bodies are never parsed or
validated; each target applies just enough escaping to keep its string
literals well-formed.

* :func:`generate_javascript` -- ``fetch`` with a ``Headers`` object. The
  body text is embedded as a JavaScript expression inside
  ``JSON.stringify(...)``.
* :func:`generate_python` -- the ``requests`` library. The body is sent as
  a string literal ``payload``.
* :func:`generate_java` -- OkHttp's request builder. The body is a Java
  string literal.
"""

from __future__ import annotations

import json

from reqport.models import RequestDescriptor


def _method(request: RequestDescriptor) -> str:
    return request.method.value if request.method else "GET"


def _double_quoted(text: str) -> str:
    """A double-quoted literal valid in both JavaScript and Python."""
    return json.dumps(text, ensure_ascii=False)


def _java_literal(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


def generate_javascript(request: RequestDescriptor) -> str:
    """Render *request* as a browser ``fetch`` call."""
    lines = ["const myHeaders = new Headers();"]
    for key, value in request.header_map().items():
        lines.append(
            f"myHeaders.append({_double_quoted(key)}, {_double_quoted(value)});"
        )

    lines += [
        "",
        "const requestOptions = {",
        f"  method: {_double_quoted(_method(request))},",
        "  headers: myHeaders,",
    ]
    if request.has_json_body():
        lines.append(f"  body: JSON.stringify({request.body_content}),")
    lines += [
        '  redirect: "follow"',
        "};",
        "",
        f"fetch({_double_quoted(request.url or '')}, requestOptions)",
        "  .then((response) => response.text())",
        "  .then((result) => console.log(result))",
        "  .catch((error) => console.error(error));",
    ]
    return "\n".join(lines)


def generate_python(request: RequestDescriptor) -> str:
    """Render *request* as a ``requests.request`` call."""
    if request.has_json_body():
        payload = f"payload = json.dumps({request.body_content})"
    else:
        payload = "payload = {}"

    entries = [
        f"  {_double_quoted(key)}: {_double_quoted(value)}"
        for key, value in request.header_map().items()
    ]

    lines = [
        "import json",
        "import requests",
        "",
        f"url = {_double_quoted(request.url or '')}",
        "",
        payload,
        "headers = {",
        *([",\n".join(entries)] if entries else []),
        "}",
        "",
        f"response = requests.request({_double_quoted(_method(request))}, "
        "url, headers=headers, data=payload)",
        "",
        "print(response.text)",
    ]
    return "\n".join(lines)


def generate_java(request: RequestDescriptor) -> str:
    """Render *request* with OkHttp.

    ``POST``, ``PUT`` and ``PATCH`` without a JSON body get an empty
    ``text/plain`` body because OkHttp rejects a null body for them.
    """
    method = _method(request)
    body: list[str] = []
    if request.has_json_body():
        body = [
            'MediaType mediaType = MediaType.parse("application/json");',
            "RequestBody body = RequestBody.create(mediaType, "
            f"{_java_literal(request.body_content)});",
        ]
    elif method in ("POST", "PUT", "PATCH"):
        body = [
            'MediaType mediaType = MediaType.parse("text/plain");',
            'RequestBody body = RequestBody.create(mediaType, "");',
        ]

    lines = [
        "OkHttpClient client = new OkHttpClient().newBuilder()",
        "  .build();",
        *body,
        "Request request = new Request.Builder()",
        f"  .url({_java_literal(request.url or '')})",
        f"  .method({_java_literal(method)}, {'body' if body else 'null'})",
    ]
    for key, value in request.header_map().items():
        lines.append(f"  .addHeader({_java_literal(key)}, {_java_literal(value)})")
    lines += [
        "  .build();",
        "Response response = client.newCall(request).execute();",
    ]
    return "\n".join(lines)
