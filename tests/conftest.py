import io

import pytest
import requests
from requests.structures import CaseInsensitiveDict

SAMPLE_HTML = (
    '<html><head><title>Test</title><meta name="description" content="desc"></head>'
    '<body><h1>H</h1><img src="a.jpg" alt="x"></body></html>'
)


def make_response(
    body: bytes = b"",
    status: int = 200,
    content_type: str | None = "text/html; charset=utf-8",
    headers: dict | None = None,
    url: str = "https://example.com/",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.raw = io.BytesIO(body)
    response.headers = CaseInsensitiveDict(headers or {})
    if content_type is not None:
        response.headers["Content-Type"] = content_type
    response.encoding = requests.utils.get_encoding_from_headers(response.headers)
    return response


class FakeSession:
    """Stands in for requests.Session; returns a canned response or raises."""

    def __init__(
        self,
        response: requests.Response | None = None,
        error: Exception | None = None,
        responses: list[requests.Response] | None = None,
    ):
        self.responses = list(responses) if responses else [response]
        self.error = error
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    def close(self):
        self.closed = True


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML
