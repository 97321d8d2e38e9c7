"""
Tests for flattening word entries into flashcard definitions.
"""
from vocabstudy.models.dictionary import WordEntry
from vocabstudy.services.dictionary import extract_definitions, get_primary_definition


def make_entry():
    return WordEntry(
        term="run",
        phonetic="/ɹʌn/",
        meanings=[
            {
                "part_of_speech": "verb",
                "definitions": [
                    {"text": "to move swiftly on foot", "example": "run to the store"},
                    {"text": "to operate"}
                ]
            },
            {
                "part_of_speech": "noun",
                "definitions": [
                    {"text": "an act of running"},
                    {"text": "a series of successes"}
                ]
            }
        ],
        source="wiktionary"
    )


class TestExtractDefinitions:
    """Tests for extract_definitions"""

    def test_top_three_in_order(self):
        definitions = extract_definitions(make_entry())

        assert [d.rank for d in definitions] == [1, 2, 3]
        assert [d.definition for d in definitions] == [
            "to move swiftly on foot", "to operate", "an act of running"
        ]
        assert definitions[2].part_of_speech == "noun"
        assert definitions[0].example == "run to the store"
        assert definitions[0].phonetic == "/ɹʌn/"

    def test_custom_limit(self):
        assert len(extract_definitions(make_entry(), limit=10)) == 4
        assert extract_definitions(make_entry(), limit=0) == []

    def test_missing_entry(self):
        assert extract_definitions(None) == []


class TestPrimaryDefinition:
    """Tests for get_primary_definition"""

    def test_shortest_wins(self):
        primary = get_primary_definition(extract_definitions(make_entry()))

        assert primary.definition == "to operate"
        assert primary.rank == 2

    def test_empty(self):
        assert get_primary_definition([]) is None
