"""
Shared plumbing for providers that talk HTTP.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from bs4 import BeautifulSoup

from vocabstudy.config import settings
from vocabstudy.models.dictionary import WordEntry
from vocabstudy.services.dictionary.providers.base import ProviderResult, normalize_term

logger = logging.getLogger(__name__)


class HttpProvider:
    """
    Base for HTTP-backed providers.

    An httpx.AsyncClient can be injected (tests use a MockTransport);
    otherwise a short-lived client is opened per lookup.
    """

    name = "http"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None
    ):
        self._client = client
        self.timeout = timeout or settings.DICTIONARY_PROVIDER_TIMEOUT_SECONDS
        self.user_agent = user_agent or settings.DICTIONARY_HTTP_USER_AGENT

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            yield client

    def _browser_headers(self, referer: Optional[str] = None) -> dict:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Language": "en-US,en;q=0.9"
        }
        if referer:
            headers["Referer"] = referer
        return headers


class HtmlScrapeProvider(HttpProvider):
    """
    Fetch a page and parse definitions out of its HTML.

    Subclasses provide ``build_url`` and ``parse``.
    """

    referer: Optional[str] = None

    def build_url(self, term: str) -> str:
        raise NotImplementedError

    def parse(self, soup: BeautifulSoup, term: str) -> Optional[WordEntry]:
        raise NotImplementedError

    async def resolve(self, term: str) -> ProviderResult:
        term = normalize_term(term)
        url = self.build_url(term)
        logger.debug(f"[{self.name}] Fetching '{term}'")

        try:
            async with self._session() as client:
                response = await client.get(url, headers=self._browser_headers(self.referer))
        except httpx.HTTPError as e:
            logger.error(f"[{self.name}] Error fetching '{term}': {e}")
            return ProviderResult.failed(self.name, str(e))

        if response.status_code == 404:
            return ProviderResult.not_found(self.name)
        if response.status_code >= 400:
            return ProviderResult.failed(self.name, f"HTTP {response.status_code}")

        entry = self.parse(BeautifulSoup(response.text, "html.parser"), term)
        if entry is None:
            return ProviderResult.not_found(self.name, "Could not parse definitions")

        logger.info(f"[{self.name}] Scraped '{term}'")
        return ProviderResult.found(self.name, entry)
