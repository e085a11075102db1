from linkpreview.config import DEFAULT_ACCEPT, Settings
from linkpreview.request_builder import build_metadata_request


def test_build_metadata_request_defaults():
    settings = Settings(timeout=12.5)
    request = build_metadata_request("https://example.com", settings=settings)

    assert request.url == "https://example.com"
    assert request.timeout == 12.5
    assert request.headers["Accept"] == DEFAULT_ACCEPT
    assert request.headers["Accept-Encoding"] == "gzip, deflate"
    assert request.headers["User-Agent"].startswith("Mozilla/5.0")


def test_build_metadata_request_caller_headers_replace_defaults():
    request = build_metadata_request(
        "https://example.com",
        timeout=3,
        headers={"user-agent": "custom-agent", "X-Trace": "1"},
        settings=Settings(),
    )

    assert request.timeout == 3
    assert request.headers["user-agent"] == "custom-agent"
    assert "User-Agent" not in request.headers
    assert request.headers["X-Trace"] == "1"


def test_request_headers_are_detached_from_caller():
    headers = {"X-Trace": "1"}
    request = build_metadata_request("https://example.com", headers=headers, settings=Settings())
    headers["X-Trace"] = "2"
    assert request.headers["X-Trace"] == "1"
