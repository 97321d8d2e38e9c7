"""
Tests for the definition providers.
HTTP is served by httpx.MockTransport; nothing leaves the process.
"""
import json
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from vocabstudy.services.dictionary.providers import (
    PROVIDER_REGISTRY,
    DuckDuckGoProvider,
    ExaProvider,
    FreeDictionaryProvider,
    GenerativeProvider,
    GoogleProvider,
    ProviderStatus,
    WiktionaryProvider,
    build_entry,
    build_providers,
)


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def html_response(body: str, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=body, headers={"Content-Type": "text/html"})
    return handler


FREE_DICTIONARY_PAYLOAD = [
    {
        "word": "ephemeral",
        "phonetics": [
            {"text": "/ɪˈfɛm(ə)ɹəl/"},
            {"text": "/əˈfɛm(ə)rəl/", "audio": "https://example.org/ephemeral.mp3"}
        ],
        "meanings": [
            {
                "partOfSpeech": "adjective",
                "definitions": [
                    {
                        "definition": "Lasting for a short period of time.",
                        "example": "an ephemeral thrill",
                        "synonyms": ["fleeting"],
                        "antonyms": ["permanent"]
                    }
                ]
            },
            {
                "partOfSpeech": "noun",
                "definitions": [
                    {"definition": "Something which lasts for a short period of time."},
                    {"definition": ""}
                ]
            }
        ]
    }
]


WIKTIONARY_HTML = """
<html><body><div class="mw-parser-output">
  <div class="mw-heading mw-heading2"><h2 id="English">English</h2></div>
  <div class="mw-heading mw-heading3"><h3 id="Pronunciation">Pronunciation</h3></div>
  <ul><li>IPA: <span class="IPA">/ɪˈfɛm(ə)ɹəl/</span></li></ul>
  <div class="mw-heading mw-heading3"><h3 id="Adjective">Adjective</h3></div>
  <p><b>ephemeral</b></p>
  <ol>
    <li>Lasting for a short period of time.
      <dl><dd>an ephemeral thrill</dd></dl>
    </li>
    <li>(biology) Living for a single day.</li>
  </ol>
  <ol><li>Not a sense list</li></ol>
  <div class="mw-heading mw-heading3"><h3 id="Noun">Noun</h3></div>
  <ol><li>Something which lasts for a short period of time.</li></ol>
  <div class="mw-heading mw-heading2"><h2 id="French">French</h2></div>
  <div class="mw-heading mw-heading3"><h3 id="Adjective_2">Adjective</h3></div>
  <ol><li>éphémère</li></ol>
</div></body></html>
"""


DUCKDUCKGO_HTML = """
<html><body>
  <div class="module--dictionary">
    <span class="phonetic">/əˈfɛm(ə)rəl/</span>
    <div class="dict-entry">
      <span class="pos">Adjective</span>
      <span class="definition">Lasting for a very short time.</span>
      <span class="example">fashions are ephemeral</span>
    </div>
    <div class="dict-entry">
      <span class="pos">Noun</span>
      <span class="definition">An ephemeral plant.</span>
    </div>
  </div>
</body></html>
"""


GOOGLE_HTML = """
<html><body>
  <div data-attrid="EntryHeader dictionary">
    <span data-dobid="hdw"><span>/əˈfem(ə)rəl/</span></span>
    <div class="thODed">
      <span class="YrbPuc">adjective</span>
      <div class="LTKOO">lasting for a very short time.</div>
      <div data-dobid="dfn">lasting for a very short time.</div>
    </div>
    <div class="thODed">
      <span class="YrbPuc">noun</span>
      <div data-dobid="dfn">an ephemeral plant.</div>
    </div>
  </div>
</body></html>
"""


class TestFreeDictionaryProvider:
    """Tests for the dictionaryapi.dev provider"""

    @pytest.mark.asyncio
    async def test_found(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json=FREE_DICTIONARY_PAYLOAD)

        provider = FreeDictionaryProvider(client=mock_client(handler))
        result = await provider.resolve("  Ephemeral ")

        assert result.success is True
        assert seen == ["https://api.dictionaryapi.dev/api/v2/entries/en/ephemeral"]
        entry = result.entry
        assert entry.source == "free-dictionary-api"
        # Transcription with audio preferred
        assert entry.phonetic == "/əˈfɛm(ə)rəl/"
        assert [m.part_of_speech for m in entry.meanings] == ["adjective", "noun"]
        assert entry.meanings[0].definitions[0].synonyms == ["fleeting"]
        # Empty senses dropped
        assert len(entry.meanings[1].definitions) == 1

    @pytest.mark.asyncio
    async def test_not_found(self):
        provider = FreeDictionaryProvider(client=mock_client(
            lambda request: httpx.Response(404, json={"title": "No Definitions Found"})
        ))

        result = await provider.resolve("zzzqx")

        assert result.status == ProviderStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_server_error(self):
        provider = FreeDictionaryProvider(client=mock_client(lambda request: httpx.Response(503)))

        result = await provider.resolve("ephemeral")

        assert result.status == ProviderStatus.ERROR
        assert result.error == "HTTP 503"

    @pytest.mark.asyncio
    async def test_invalid_payload(self):
        provider = FreeDictionaryProvider(client=mock_client(
            lambda request: httpx.Response(200, text="<html>oops</html>")
        ))

        result = await provider.resolve("ephemeral")

        assert result.status == ProviderStatus.ERROR

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        provider = FreeDictionaryProvider(client=mock_client(handler))
        result = await provider.resolve("ephemeral")

        assert result.status == ProviderStatus.ERROR
        assert "connection refused" in result.error


class TestScrapeProviders:
    """Tests for the HTML scraping providers"""

    @pytest.mark.asyncio
    async def test_wiktionary_english_section(self):
        provider = WiktionaryProvider(client=mock_client(html_response(WIKTIONARY_HTML)))

        result = await provider.resolve("ephemeral")

        assert result.success is True
        entry = result.entry
        assert entry.source == "wiktionary"
        assert entry.phonetic == "/ɪˈfɛm(ə)ɹəl/"
        assert [m.part_of_speech for m in entry.meanings] == ["adjective", "noun"]
        adjective = entry.meanings[0].definitions
        assert adjective[0].text == "Lasting for a short period of time."
        assert adjective[0].example == "an ephemeral thrill"
        assert len(adjective) == 2
        assert all("éphémère" not in d.text for m in entry.meanings for d in m.definitions)

    @pytest.mark.asyncio
    async def test_wiktionary_without_english_section(self):
        html = '<html><body><div class="mw-heading mw-heading2"><h2 id="French">French</h2></div></body></html>'
        provider = WiktionaryProvider(client=mock_client(html_response(html)))

        result = await provider.resolve("éphémère")

        assert result.status == ProviderStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_wiktionary_missing_page(self):
        provider = WiktionaryProvider(client=mock_client(html_response("", status_code=404)))

        result = await provider.resolve("zzzqx")

        assert result.status == ProviderStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_duckduckgo_structured_entries(self):
        provider = DuckDuckGoProvider(client=mock_client(html_response(DUCKDUCKGO_HTML)))

        result = await provider.resolve("ephemeral")

        assert result.success is True
        entry = result.entry
        assert entry.phonetic == "/əˈfɛm(ə)rəl/"
        assert entry.meanings[0].part_of_speech == "adjective"
        assert entry.meanings[0].definitions[0].example == "fashions are ephemeral"
        assert entry.meanings[1].definitions[0].text == "An ephemeral plant."

    @pytest.mark.asyncio
    async def test_duckduckgo_without_dictionary_module(self):
        provider = DuckDuckGoProvider(client=mock_client(html_response("<html><body>results</body></html>")))

        result = await provider.resolve("ephemeral")

        assert result.status == ProviderStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_google_dictionary_card(self):
        provider = GoogleProvider(client=mock_client(html_response(GOOGLE_HTML)))

        result = await provider.resolve("ephemeral")

        assert result.success is True
        entry = result.entry
        assert entry.phonetic == "/əˈfem(ə)rəl/"
        assert [m.part_of_speech for m in entry.meanings] == ["adjective", "noun"]
        # Duplicate sense text collapsed
        assert len(entry.meanings[0].definitions) == 1

    @pytest.mark.asyncio
    async def test_google_blocked(self):
        provider = GoogleProvider(client=mock_client(html_response("", status_code=429)))

        result = await provider.resolve("ephemeral")

        assert result.status == ProviderStatus.ERROR
        assert result.error == "HTTP 429"


class TestAnswerProviders:
    """Tests for the Exa and generative providers"""

    @pytest.mark.asyncio
    async def test_exa_without_key(self):
        provider = ExaProvider(api_key=None)
        provider.api_key = None

        result = await provider.resolve("ephemeral")

        assert result.status == ProviderStatus.ERROR

    @pytest.mark.asyncio
    async def test_exa_structured_answer(self):
        requests = []

        def handler(request):
            requests.append(json.loads(request.content))
            content = json.dumps({
                "definition": "lasting a very short time",
                "example": "ephemeral fame",
                "synonyms": ["brief"],
                "antonyms": [],
                "partOfSpeech": "adjective"
            })
            return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

        provider = ExaProvider(api_key="exa-key", client=mock_client(handler))
        result = await provider.resolve("ephemeral")

        assert result.success is True
        assert result.entry.source == "exa"
        assert result.entry.meanings[0].part_of_speech == "adjective"
        assert requests[0]["messages"][0]["content"] == "define ephemeral"

    @pytest.mark.asyncio
    async def test_exa_empty_answer(self):
        content = json.dumps({"definition": "", "example": "", "synonyms": [], "antonyms": []})
        provider = ExaProvider(api_key="exa-key", client=mock_client(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"content": content}}]})
        ))

        result = await provider.resolve("zzzqx")

        assert result.status == ProviderStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_generative_lookup(self):
        openai_service = MagicMock()
        openai_service.is_configured = True
        openai_service.define_word = AsyncMock(return_value={
            "definition": "lasting for a very short time",
            "partOfSpeech": "adjective",
            "example": "ephemeral fame",
            "synonyms": ["transient"],
            "antonyms": ["enduring"],
            "phonetic": "/əˈfɛm(ə)rəl/"
        })

        result = await GenerativeProvider(openai_service=openai_service).resolve("Ephemeral")

        assert result.success is True
        assert result.entry.source == "llm"
        assert result.entry.phonetic == "/əˈfɛm(ə)rəl/"
        openai_service.define_word.assert_awaited_once_with("ephemeral")

    @pytest.mark.asyncio
    async def test_generative_incomplete_answer(self):
        openai_service = MagicMock()
        openai_service.is_configured = True
        openai_service.define_word = AsyncMock(return_value={"definition": "something"})

        result = await GenerativeProvider(openai_service=openai_service).resolve("ephemeral")

        assert result.status == ProviderStatus.ERROR

    @pytest.mark.asyncio
    async def test_generative_not_configured(self):
        openai_service = MagicMock()
        openai_service.is_configured = False
        openai_service.define_word = AsyncMock()

        result = await GenerativeProvider(openai_service=openai_service).resolve("ephemeral")

        assert result.status == ProviderStatus.ERROR
        openai_service.define_word.assert_not_awaited()


class TestRegistry:
    """Tests for building the chain from settings"""

    def test_build_providers_keeps_order(self):
        providers = build_providers(["wiktionary", "free_dictionary", "llm"])

        assert [p.name for p in providers] == ["wiktionary", "free-dictionary-api", "llm"]

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            build_providers(["bing"])

    def test_registry_names(self):
        assert set(PROVIDER_REGISTRY) == {"free_dictionary", "wiktionary", "duckduckgo", "google", "exa", "llm"}

    def test_build_entry_drops_empty_senses(self):
        assert build_entry("x", [{"part_of_speech": "noun", "definitions": [{"text": "  "}]}], "test") is None

        entry = build_entry("x", [{"part_of_speech": "Noun", "definitions": [{"text": " a  thing "}]}], "test")
        assert entry.meanings[0].part_of_speech == "noun"
        assert entry.meanings[0].definitions[0].text == "a thing"
