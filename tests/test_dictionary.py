"""Tests for the user dictionary."""

import json

import pytest

from subtitle_normalizer.dictionary import DictionaryEntry, UserDictionary


@pytest.fixture
def dictionary():
    return UserDictionary([
        DictionaryEntry(term="ソニー", reading="そにー", correct_text="Sony", category="企業", id="a"),
        DictionaryEntry(term="ソニーグループ", correct_text="ソニーグループ株式会社", category="企業", id="b"),
        DictionaryEntry(term="田中", reading="たなか", category="人名", id="c"),
    ])


class TestEntry:

    def test_correct_text_defaults_to_term(self):
        assert DictionaryEntry(term="田中").correct_text == "田中"

    def test_generated_ids_unique(self):
        assert DictionaryEntry(term="a").id != DictionaryEntry(term="a").id

    def test_from_dict_accepts_both_key_styles(self):
        camel = DictionaryEntry.from_dict({"term": "a", "correctText": "A", "id": "1"})
        snake = DictionaryEntry.from_dict({"term": "a", "correct_text": "A", "id": "1"})
        assert camel == snake

    def test_to_dict_uses_camel_case(self):
        entry = DictionaryEntry(term="a", correct_text="A", id="1")
        assert entry.to_dict() == {
            "id": "1", "term": "a", "reading": "", "correctText": "A", "category": "",
        }


class TestLookup:

    def test_contains_term_and_correct_text(self, dictionary):
        assert dictionary.contains("ソニー")
        assert dictionary.contains("Sony")
        assert not dictionary.contains("そにー")

    def test_categories_in_first_seen_order(self, dictionary):
        assert dictionary.categories() == ["企業", "人名"]

    def test_by_category(self, dictionary):
        assert [e.id for e in dictionary.by_category("人名")] == ["c"]

    def test_search_is_case_insensitive(self, dictionary):
        assert [e.id for e in dictionary.search("sony")] == ["a"]

    def test_get(self, dictionary):
        assert dictionary.get("b").term == "ソニーグループ"
        assert dictionary.get("missing") is None


class TestEditing:

    def test_add_and_remove(self, dictionary):
        dictionary.add(DictionaryEntry(term="新語", id="d"))
        assert len(dictionary) == 4
        assert dictionary.remove("d") is True
        assert dictionary.remove("d") is False
        assert len(dictionary) == 3

    def test_update(self, dictionary):
        assert dictionary.update(DictionaryEntry(term="田中", correct_text="田中太郎", id="c"))
        assert dictionary.get("c").correct_text == "田中太郎"
        assert not dictionary.update(DictionaryEntry(term="x", id="zzz"))


class TestApply:

    def test_longest_term_first(self, dictionary):
        assert dictionary.apply("ソニーグループのそにー") == "ソニーグループ株式会社のSony"

    def test_reading_replaced(self, dictionary):
        assert dictionary.apply("たなかさん") == "田中さん"

    def test_empty_dictionary(self):
        assert UserDictionary().apply("そにー") == "そにー"


class TestPersistence:

    def test_save_and_load(self, dictionary, tmp_path):
        path = tmp_path / "dict.json"
        dictionary.save(path)
        loaded = UserDictionary.load(path)
        assert [e.to_dict() for e in loaded] == [e.to_dict() for e in dictionary]

    def test_load_rejects_non_list(self, tmp_path):
        path = tmp_path / "dict.json"
        path.write_text(json.dumps({"term": "a"}), encoding="utf-8")
        with pytest.raises(ValueError):
            UserDictionary.load(path)

    def test_load_rejects_entry_without_term(self, tmp_path):
        path = tmp_path / "dict.json"
        path.write_text(json.dumps([{"reading": "a"}]), encoding="utf-8")
        with pytest.raises(ValueError):
            UserDictionary.load(path)

    def test_terms_file(self, tmp_path):
        path = tmp_path / "terms.txt"
        path.write_text("# 固有名詞\n田中\n\n  東京  \n", encoding="utf-8")
        loaded = UserDictionary.from_terms_file(path, category="固有名詞")
        assert [e.term for e in loaded] == ["田中", "東京"]
        assert loaded.categories() == ["固有名詞"]
