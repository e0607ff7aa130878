"""Page fetching: outbound links and plain text for a URL."""

import logging
from typing import Optional, Protocol, Tuple

import httpx
from bs4 import BeautifulSoup

from sitegraph.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from sitegraph.exceptions import FetchError
from sitegraph.models import FetchResult

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Anything that can turn a URL into outbound hrefs and page text.

    Implementations raise FetchError on non-2xx status, timeout or transport
    failure.
    """

    async def fetch(self, url: str, timeout: float) -> FetchResult:
        ...


def extract_links_and_text(html: str) -> Tuple[list, str]:
    """Pull raw hrefs and body text out of an HTML document.

    Args:
        html: HTML content

    Returns:
        Tuple of (hrefs in document order, body text)
    """
    soup = BeautifulSoup(html, "html.parser")

    links = [anchor["href"] for anchor in soup.find_all("a", href=True) if anchor["href"]]

    # Scripts and styles are not page text
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    root = soup.body or soup
    text = root.get_text(separator=" ", strip=True)
    return links, text


class HttpFetcher:
    """Fetches pages over HTTP with httpx and parses them with BeautifulSoup."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the fetcher.

        Args:
            user_agent: User agent string sent with every request
            client: Optional pre-built client (the fetcher will not close it)
        """
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            follow_redirects=True,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            },
        )

    async def __aenter__(self) -> "HttpFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, url: str, timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS) -> FetchResult:
        """Fetch a page and extract its outbound links and text.

        Args:
            url: Page URL
            timeout: Request timeout in seconds

        Returns:
            FetchResult with raw hrefs and body text

        Raises:
            FetchError: On non-2xx status, timeout or transport error
        """
        try:
            response = await self._client.get(url, timeout=timeout)
        except httpx.TimeoutException as e:
            raise FetchError(f"Request timeout after {timeout}s", url=url) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error_msg = str(e) or type(e).__name__
            raise FetchError(f"Connection error: {error_msg}", url=url) from e

        if not response.is_success:
            status = response.status_code
            raise FetchError(f"HTTP {status}", url=url, status_code=status)

        links, text = extract_links_and_text(response.text)
        logger.debug(f"Fetched {url}: {len(links)} links, {len(text)} chars")
        return FetchResult(outbound_urls=links, page_text=text)
