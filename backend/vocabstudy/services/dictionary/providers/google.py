"""
Google provider.
Scrapes the dictionary card of a "define <term>" search.
"""
import re
from typing import Optional
from urllib.parse import quote_plus

from bs4 import BeautifulSoup

from vocabstudy.models.dictionary import WordEntry
from vocabstudy.services.dictionary.providers.base import build_entry, clean_text
from vocabstudy.services.dictionary.providers.http import HtmlScrapeProvider


POS_PREFIX = re.compile(r"^(noun|verb|adjective|adverb)\b", re.IGNORECASE)


class GoogleProvider(HtmlScrapeProvider):
    """HTML scrape of Google's dictionary card"""

    name = "google"
    base_url = "https://www.google.com/search"
    referer = "https://www.google.com/"

    def build_url(self, term: str) -> str:
        return f"{self.base_url}?q={quote_plus('define ' + term)}&hl=en"

    def parse(self, soup: BeautifulSoup, term: str) -> Optional[WordEntry]:
        card = soup.select_one('[data-attrid*="dictionary"], .lr_container, .thODed')
        if card is None:
            return None

        phonetic_el = soup.select_one('[data-dobid="hdw"] span, .PZPZlf span')
        phonetic = phonetic_el.get_text() if phonetic_el is not None else None

        meanings: dict[str, list] = {}

        # Sense containers, each with its own part of speech
        for container in soup.select(".thODed"):
            pos_el = container.select_one(".YrbPuc, i")
            part_of_speech = clean_text(pos_el.get_text()).lower() if pos_el is not None else "unknown"
            for def_el in container.select('.LTKOO, [data-dobid="dfn"]'):
                text = clean_text(def_el.get_text())
                senses = meanings.setdefault(part_of_speech or "unknown", [])
                if text and not POS_PREFIX.match(text) and {"text": text} not in senses:
                    senses.append({"text": text})

        # Flat definition list, part of speech from the nearest preceding label
        if not meanings:
            for def_el in soup.select('[data-dobid="dfn"]'):
                pos_el = def_el.find_previous(attrs={"data-dobid": "pos"})
                part_of_speech = clean_text(pos_el.get_text()).lower() if pos_el is not None else "unknown"
                meanings.setdefault(part_of_speech or "unknown", []).append({"text": def_el.get_text()})

        return build_entry(
            term,
            [{"part_of_speech": pos, "definitions": senses} for pos, senses in meanings.items()],
            self.name,
            phonetic=phonetic
        )
