"""
Wiktionary provider.
Scrapes the English section of en.wiktionary.org pages.
"""
from typing import Optional
from urllib.parse import quote

from bs4 import BeautifulSoup, NavigableString, Tag

from vocabstudy.models.dictionary import WordEntry
from vocabstudy.services.dictionary.providers.base import build_entry, clean_text
from vocabstudy.services.dictionary.providers.http import HtmlScrapeProvider


PARTS_OF_SPEECH = {
    "noun", "verb", "adjective", "adverb", "pronoun", "preposition",
    "conjunction", "interjection", "article", "determiner"
}

HEADING_TAGS = ("h2", "h3", "h4", "h5")
NESTED_LIST_TAGS = ("ol", "ul", "dl")


def _classes(element: Tag) -> list:
    return element.get("class") or []


def _is_language_heading(element: Tag) -> bool:
    return element.name == "h2" or "mw-heading2" in _classes(element)


def _heading_text(element: Tag) -> Optional[str]:
    """Text of a section heading, or None if the element is not one."""
    if element.name in HEADING_TAGS:
        heading = element
    elif any(c.startswith("mw-heading") for c in _classes(element)):
        heading = element.find(HEADING_TAGS)
    else:
        return None
    if heading is None:
        return None
    return heading.get_text().replace("[edit]", "").strip()


def _sense_text(item: Tag) -> str:
    """Text of a list item without its nested sub-senses, quotes and examples."""
    parts = []
    for child in item.children:
        if isinstance(child, Tag):
            if child.name in NESTED_LIST_TAGS:
                continue
            parts.append(child.get_text())
        elif isinstance(child, NavigableString):
            parts.append(str(child))
    return clean_text("".join(parts))


class WiktionaryProvider(HtmlScrapeProvider):
    """HTML scrape of Wiktionary"""

    name = "wiktionary"
    base_url = "https://en.wiktionary.org/wiki"

    def build_url(self, term: str) -> str:
        return f"{self.base_url}/{quote(term, safe='')}"

    def parse(self, soup: BeautifulSoup, term: str) -> Optional[WordEntry]:
        anchor = soup.find(id="English")
        if anchor is None:
            return None

        # Old layout puts the id on a span inside the h2, new layout wraps the h2 in div.mw-heading2
        header = anchor if anchor.name == "h2" else anchor.find_parent("h2")
        if header is None:
            return None
        if header.parent is not None and "mw-heading2" in _classes(header.parent):
            header = header.parent

        phonetic = None
        current_pos = None
        meanings = []

        for sibling in header.find_next_siblings():
            if _is_language_heading(sibling):
                break

            if phonetic is None:
                ipa = sibling if "IPA" in _classes(sibling) else sibling.select_one(".IPA")
                if ipa is not None:
                    phonetic = ipa.get_text().strip()

            heading = _heading_text(sibling)
            if heading is not None:
                current_pos = heading.lower() if heading.lower() in PARTS_OF_SPEECH else None
                continue

            if sibling.name == "ol" and current_pos:
                senses = []
                for item in sibling.find_all("li", recursive=False):
                    text = _sense_text(item)
                    if not text:
                        continue
                    example = item.select_one("dd, .e-example, .h-usage-example, ul li")
                    senses.append({
                        "text": text,
                        "example": example.get_text() if example is not None else None
                    })
                if senses:
                    meanings.append({"part_of_speech": current_pos, "definitions": senses})
                # Only the first list under a heading holds the senses
                current_pos = None

        return build_entry(term, meanings, self.name, phonetic=phonetic)
