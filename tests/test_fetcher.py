"""Tests for the HTTP fetcher and HTML extraction."""

import httpx
import pytest

from sitegraph.constants import DEFAULT_USER_AGENT
from sitegraph.exceptions import FetchError
from sitegraph.fetcher import HttpFetcher, extract_links_and_text

PAGE = """
<html>
  <head><title>Docs</title><style>.x { color: red }</style></head>
  <body>
    <h1>Getting started</h1>
    <a href="/guide">Guide</a>
    <script>var tracking = "should not appear";</script>
    <p>Read the <a href="https://example.com/api#auth">API</a> reference.</p>
    <a name="anchor-only">No href</a>
    <a href="">Empty</a>
  </body>
</html>
"""


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestExtractLinksAndText:
    """Tests for extract_links_and_text."""

    def test_links_in_document_order(self):
        """Every non-empty href is returned in order."""
        links, _ = extract_links_and_text(PAGE)
        assert links == ["/guide", "https://example.com/api#auth"]

    def test_text_excludes_scripts_and_styles(self):
        """Script and style contents are not page text."""
        _, text = extract_links_and_text(PAGE)
        assert "Getting started" in text
        assert "reference" in text
        assert "tracking" not in text
        assert "color" not in text
        # head is outside body
        assert "Docs" not in text

    def test_document_without_body(self):
        """Fragments without a body use the whole document."""
        links, text = extract_links_and_text('<p>Hello <a href="x">there</a></p>')
        assert links == ["x"]
        assert text == "Hello there"

    def test_empty_document(self):
        links, text = extract_links_and_text("")
        assert links == []
        assert text == ""


class TestHttpFetcher:
    """Tests for HttpFetcher against a mock transport."""

    @pytest.mark.asyncio
    async def test_fetch_success(self):
        """A 200 response is parsed into links and text."""
        def handler(request):
            return httpx.Response(200, text=PAGE)

        async with mock_client(handler) as client:
            result = await HttpFetcher(client=client).fetch("https://example.com/")

        assert result.outbound_urls == ["/guide", "https://example.com/api#auth"]
        assert "Getting started" in result.page_text

    @pytest.mark.asyncio
    async def test_non_success_status(self):
        """Non-2xx responses raise FetchError with the status code."""
        def handler(request):
            return httpx.Response(404, text="missing")

        async with mock_client(handler) as client:
            with pytest.raises(FetchError) as exc_info:
                await HttpFetcher(client=client).fetch("https://example.com/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == "https://example.com/missing"
        assert "HTTP 404" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Timeouts become FetchError."""
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        async with mock_client(handler) as client:
            with pytest.raises(FetchError, match="timeout"):
                await HttpFetcher(client=client).fetch("https://example.com/", timeout=1)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Transport errors become FetchError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler) as client:
            with pytest.raises(FetchError, match="Connection error"):
                await HttpFetcher(client=client).fetch("https://example.com/")

    @pytest.mark.asyncio
    async def test_shared_client_is_not_closed(self):
        """A caller-provided client stays open after the fetcher closes."""
        def handler(request):
            return httpx.Response(200, text="<body>ok</body>")

        async with mock_client(handler) as client:
            async with HttpFetcher(client=client):
                pass
            assert not client.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_headers(self):
        """The fetcher's own client sends the configured user agent."""
        fetcher = HttpFetcher()
        assert fetcher._client.headers["User-Agent"] == DEFAULT_USER_AGENT
        await fetcher.aclose()
        assert fetcher._client.is_closed

    @pytest.mark.asyncio
    async def test_custom_user_agent(self):
        async with HttpFetcher(user_agent="TestBot/1.0") as fetcher:
            assert fetcher._client.headers["User-Agent"] == "TestBot/1.0"
