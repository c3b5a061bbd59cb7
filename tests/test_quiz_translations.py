"""
Tests for the English/Dutch name tables and UI strings.
"""
import pytest

from quiz_translations import CLUES, GENERIC_CLUE, UI, Language, Translator


class TestLanguage:
    @pytest.mark.parametrize("code, expected", [("en", Language.EN), (" NL ", Language.NL), ("fr", Language.NL), (None, Language.NL)])
    def test_parse(self, code, expected):
        assert Language.parse(code) is expected

    def test_other(self):
        assert Language.EN.other() is Language.NL
        assert Language.NL.other() is Language.EN


class TestNames:
    def test_dutch_capital(self, translator):
        assert translator.capital(Language.NL, "Paris") == "Parijs"
        assert translator.capital(Language.NL, "Brussels") == "Brussel"

    def test_english_is_identity(self, translator):
        assert translator.capital(Language.EN, "Paris") == "Paris"
        assert translator.country(Language.EN, "Germany") == "Germany"

    def test_untranslated_names_pass_through(self, translator):
        assert translator.capital(Language.NL, "Amsterdam") == "Amsterdam"
        assert translator.country(Language.NL, "Atlantis") == "Atlantis"

    def test_dutch_country(self, translator):
        assert translator.country(Language.NL, "Germany") == "Duitsland"

    def test_canonical_capital(self, translator):
        assert translator.canonical_capital(" berlijn ") == "Berlin"
        assert translator.canonical_capital("PARIS") == "Paris"
        assert translator.canonical_capital("Gotham") == "Gotham"


class TestClues:
    def test_country_clue(self, translator):
        assert "Eiffel" in translator.clue(Language.EN, "France")
        assert "Eiffeltoren" in translator.clue(Language.NL, "France")

    def test_generic_fallback(self, translator):
        assert translator.clue(Language.NL, "Poland") == GENERIC_CLUE[Language.NL]

    def test_both_languages_cover_the_same_countries(self):
        assert set(CLUES[Language.EN]) == set(CLUES[Language.NL])

    def test_custom_tables(self):
        translator = Translator(clues={Language.EN: {"Poland": "Chopin was born nearby."}})
        assert translator.clue(Language.EN, "Poland") == "Chopin was born nearby."


class TestUi:
    def test_both_languages_define_the_same_keys(self):
        assert set(UI[Language.EN]) == set(UI[Language.NL])

    def test_lookup(self, translator):
        assert translator.ui(Language.NL, "correct") == "Juist!"
        assert translator.ui(Language.EN, "incorrect") == "Incorrect."

    def test_unknown_key_is_returned(self, translator):
        assert translator.ui(Language.NL, "no_such_key") == "no_such_key"
