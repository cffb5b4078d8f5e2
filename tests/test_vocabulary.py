"""Tests for the vocabulary dataset, word records and the query service."""

import random

import pytest

from backend.config import settings
from backend.vocab.matching import VocabularyFilter
from backend.vocab.service import VocabularyService, get_vocabulary
from backend.vocab.word import Declension, Gender, WordRecord, normalize_gender


@pytest.fixture
def service(pool) -> VocabularyService:
    return VocabularyService(pool)


# --- Word records ---


class TestWordRecord:
    def test_from_dict_reads_dataset_keys(self) -> None:
        word = WordRecord.from_dict(
            {
                "id": "puer_0007",
                "nominative": "puer",
                "genitive": "puerī",
                "declension": "2nd",
                "gender": "masculine",
                "spanishTranslation": "Niño",
                "additionalMeanings": ["muchacho"],
            }
        )
        assert word.translation == "Niño"
        assert word.additional_meanings == ("muchacho",)
        assert word.dictionary_form == "puer, puerī"

    def test_round_trip_shape(self, word_factory) -> None:
        word = word_factory()
        assert WordRecord.from_dict(word.to_dict()) == word

    def test_from_dict_normalizes_gender(self) -> None:
        word = WordRecord.from_dict(
            {"id": "x", "nominative": "cīvis", "gender": "masculine/feminine", "declension": "3rd"}
        )
        assert word.gender == "common"

    def test_records_are_immutable(self, word_factory) -> None:
        word = word_factory()
        with pytest.raises(AttributeError):
            word.nominative = "rosae"


class TestNormalizeGender:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("masculine", "masculine"),
            ("Femenino", "feminine"),
            ("neutro", "neuter"),
            ("masculine and feminine", "common"),
            ("común", "common"),
            ("adjective", "common"),
            ("neuter and masculine", "neuter"),
        ],
    )
    def test_known_values(self, raw, expected) -> None:
        assert normalize_gender(raw) == expected

    def test_unknown_falls_back_to_common(self, caplog) -> None:
        assert normalize_gender("plural") == Gender.COMMON.value
        assert "Unknown gender" in caplog.text


# --- Bundled dataset ---


class TestDataset:
    def test_loads_bundled_vocabulary(self) -> None:
        vocabulary = VocabularyService.from_file(settings.vocabulary_path)
        assert len(vocabulary) == 24

    def test_every_word_has_valid_labels(self) -> None:
        declensions = {d.value for d in Declension}
        genders = {g.value for g in Gender}
        for word in get_vocabulary().all_words():
            assert word.declension in declensions
            assert word.gender in genders
            assert word.nominative and word.genitive and word.translation

    def test_ids_are_unique(self) -> None:
        ids = [w.id for w in get_vocabulary().all_words()]
        assert len(ids) == len(set(ids))

    def test_singleton(self) -> None:
        assert get_vocabulary() is get_vocabulary()

    def test_accent_free_search_finds_accented_translation(self) -> None:
        results = get_vocabulary().search("nino")
        assert results[0].id == "puer_0007"


# --- Service ---


class TestVocabularyService:
    def test_get_by_id(self, service) -> None:
        assert service.get_by_id("rex_0004").nominative == "rēx"
        assert service.get_by_id("nope") is None

    def test_get_by_ids_keeps_collection_order(self, service) -> None:
        words = service.get_by_ids(["manus_0005", "rosa_0001", "missing"])
        assert [w.id for w in words] == ["rosa_0001", "manus_0005"]

    def test_filter(self, service) -> None:
        words = service.filter(VocabularyFilter.build(genders=["masculine"]))
        assert [w.id for w in words] == ["dominus_0002", "rex_0004"]

    def test_search_ranks(self, service) -> None:
        assert [w.id for w in service.search("rex")] == ["rex_0004"]
        assert service.search("") == []

    def test_random_words_distinct(self, service) -> None:
        words = service.random_words(3, rng=random.Random(1))
        assert len(words) == 3
        assert len({w.id for w in words}) == 3

    def test_random_words_capped_at_pool(self, service) -> None:
        assert len(service.random_words(50, rng=random.Random(1))) == len(service)

    def test_random_words_respects_filter(self, service) -> None:
        criteria = VocabularyFilter.build(declensions=["2nd"])
        words = service.random_words(10, criteria, rng=random.Random(1))
        assert {w.id for w in words} == {"dominus_0002", "bellum_0003"}

    def test_random_words_negative_count(self, service) -> None:
        assert service.random_words(-1) == []

    def test_by_declension_has_every_group(self, service) -> None:
        grouped = service.by_declension()
        assert set(grouped) == {"1st", "2nd", "3rd", "4th", "5th"}
        assert grouped["5th"] == []
        assert [w.id for w in grouped["2nd"]] == ["dominus_0002", "bellum_0003"]

    def test_statistics(self, service) -> None:
        stats = service.statistics()
        assert stats["total_words"] == 5
        assert stats["by_declension"] == {"1st": 1, "2nd": 2, "3rd": 1, "4th": 1}
        assert stats["by_gender"] == {"feminine": 2, "masculine": 2, "neuter": 1}
        assert stats["with_additional_meanings"] == 2

    def test_duplicate_ids_logged(self, word_factory, caplog) -> None:
        VocabularyService([word_factory(), word_factory()])
        assert "duplicate ids" in caplog.text
