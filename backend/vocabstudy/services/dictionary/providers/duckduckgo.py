"""
DuckDuckGo provider.
Scrapes the dictionary widget of a "define <term>" search.
"""
import re
from typing import Optional
from urllib.parse import quote_plus

from bs4 import BeautifulSoup

from vocabstudy.models.dictionary import WordEntry
from vocabstudy.services.dictionary.providers.base import build_entry, clean_text
from vocabstudy.services.dictionary.providers.http import HtmlScrapeProvider


def _add_sense(meanings: dict, part_of_speech: str, sense: dict) -> None:
    meanings.setdefault(part_of_speech, []).append(sense)


class DuckDuckGoProvider(HtmlScrapeProvider):
    """HTML scrape of DuckDuckGo's dictionary module"""

    name = "duckduckgo"
    base_url = "https://duckduckgo.com/"
    referer = "https://duckduckgo.com/"

    def build_url(self, term: str) -> str:
        return f"{self.base_url}?ia=web&q={quote_plus('define ' + term)}"

    def parse(self, soup: BeautifulSoup, term: str) -> Optional[WordEntry]:
        module = soup.select_one('.module--dictionary, .dictionary, [data-section="dictionary"]')
        if module is None and soup.select_one(".definition, .dict-entry, .meaning") is None:
            return None

        phonetic_el = soup.select_one('.phonetic, .pronunciation, [class*="phonetic"]')
        phonetic = phonetic_el.get_text() if phonetic_el is not None else None

        meanings: dict[str, list] = {}

        # Structured entries
        for entry in soup.select(".dict-entry, .definition-entry, .meaning-entry"):
            pos_el = entry.select_one('.pos, .part-of-speech, [class*="part-of-speech"]')
            def_el = entry.select_one(".definition, .def")
            if def_el is None:
                continue
            example_el = entry.select_one('.example, .usage, [class*="example"]')
            _add_sense(
                meanings,
                clean_text(pos_el.get_text()).lower() if pos_el is not None else "unknown",
                {
                    "text": def_el.get_text(),
                    "example": example_el.get_text() if example_el is not None else None
                }
            )

        # List based entries, part of speech in parentheses
        if not meanings:
            root = module or soup
            for item in root.select("ol li, ul.definitions li"):
                text = clean_text(item.get_text())
                if not 10 < len(text) < 500:
                    continue
                pos_match = re.search(r"\(([^)]+)\)", text)
                part_of_speech = pos_match.group(1).lower() if pos_match else "unknown"
                _add_sense(
                    meanings,
                    part_of_speech,
                    {"text": re.sub(r"\([^)]+\)", "", text, count=1)}
                )

        return build_entry(
            term,
            [{"part_of_speech": pos, "definitions": senses} for pos, senses in meanings.items()],
            self.name,
            phonetic=phonetic
        )
