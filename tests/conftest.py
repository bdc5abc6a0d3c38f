import json
from urllib.parse import urlencode

import pytest
from starlette.requests import Request


def build_request(
    form=None,
    query=None,
    json_body=None,
    headers=None,
    client=("203.0.113.7", 50000),
    method="POST",
    body=b"",
) -> Request:
    """Build a real Starlette Request carrying the given form/query/JSON data.

    A raw *body* is sent as-is with whatever content-type *headers* declare.
    """
    all_headers = dict(headers or {})
    if form is not None:
        body = urlencode(form).encode()
        all_headers["content-type"] = "application/x-www-form-urlencoded"
    elif json_body is not None:
        body = json.dumps(json_body).encode()
        all_headers["content-type"] = "application/json"

    scope = {
        "type": "http",
        "method": method,
        "path": "/",
        "query_string": urlencode(query or {}).encode(),
        "headers": [(k.lower().encode(), v.encode()) for k, v in all_headers.items()],
        "client": client,
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def make_request():
    return build_request
