"""Tests for the vocabulary normalization script."""

import pytest

from scripts.normalize_vocabulary import (
    capitalize_first,
    make_word_id,
    normalize_declension,
    normalize_entry,
    normalize_vocabulary,
)


class TestHelpers:
    def test_capitalize_first(self) -> None:
        assert capitalize_first("  niño ") == "Niño"
        assert capitalize_first("") == ""

    def test_make_word_id(self) -> None:
        assert make_word_id("Rēx", 10) == "rex_0011"
        assert make_word_id("rosa", 0) == "rosa_0001"

    @pytest.mark.parametrize("raw,expected", [(1, "1st"), ("3", "3rd"), ("5th", "5th")])
    def test_normalize_declension(self, raw, expected) -> None:
        assert normalize_declension(raw) == expected

    def test_invalid_declension(self) -> None:
        with pytest.raises(ValueError):
            normalize_declension(6)


class TestNormalizeVocabulary:
    def test_normalize_entry(self) -> None:
        entry = normalize_entry(
            {
                "nominative": " canis ",
                "genitive": "canis",
                "declension": 3,
                "gender": "masculine/feminine",
                "spanishTranslation": "perro",
                "additionalMeanings": ["perra", " "],
            },
            15,
        )
        assert entry == {
            "id": "canis_0016",
            "nominative": "canis",
            "genitive": "canis",
            "declension": "3rd",
            "gender": "common",
            "spanishTranslation": "Perro",
            "additionalMeanings": ["perra"],
        }

    def test_existing_id_kept(self) -> None:
        entry = normalize_entry({"id": "x_1", "nominative": "rosa", "declension": 1, "gender": "feminine"}, 0)
        assert entry["id"] == "x_1"

    def test_bad_entries_skipped(self, caplog) -> None:
        raw = [
            {"nominative": "rosa", "declension": 1, "gender": "feminine", "spanishTranslation": "rosa"},
            {"nominative": "broken", "declension": 9},
            {"declension": 2},
        ]
        result = normalize_vocabulary(raw)
        assert [e["nominative"] for e in result] == ["rosa"]
        assert "Skipping entry 1" in caplog.text
