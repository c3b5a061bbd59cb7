"""Bilingual (English/Dutch) name dictionary and UI strings.

The dataset stores every name in English; these tables map canonical names
to their display form. Lookups never fail: an untranslated name is returned
unchanged.
"""
from enum import Enum
from typing import Dict, Optional


class Language(str, Enum):
    EN = "en"
    NL = "nl"

    @classmethod
    def parse(cls, value: str) -> "Language":
        """Return the language for a code like "nl", defaulting to Dutch."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.NL

    def other(self) -> "Language":
        return Language.EN if self is Language.NL else Language.NL


# ---------- Names ----------
CAPITALS_NL: Dict[str, str] = {
    "Athens": "Athene",
    "Belgrade": "Belgrado",
    "Berlin": "Berlijn",
    "Brussels": "Brussel",
    "Bucharest": "Boekarest",
    "Budapest": "Boedapest",
    "Chișinău": "Chisinau",
    "Copenhagen": "Kopenhagen",
    "Kyiv": "Kiev",
    "Lisbon": "Lissabon",
    "London": "Londen",
    "Luxembourg": "Luxemburg",
    "Moscow": "Moskou",
    "Paris": "Parijs",
    "Prague": "Praag",
    "Vienna": "Wenen",
    "Warsaw": "Warschau",
}

COUNTRIES_NL: Dict[str, str] = {
    "Albania": "Albanië",
    "Austria": "Oostenrijk",
    "Belarus": "Wit-Rusland",
    "Belgium": "België",
    "Bosnia and Herzegovina": "Bosnië en Herzegovina",
    "Bulgaria": "Bulgarije",
    "Croatia": "Kroatië",
    "Czechia": "Tsjechië",
    "Denmark": "Denemarken",
    "Estonia": "Estland",
    "France": "Frankrijk",
    "Germany": "Duitsland",
    "Greece": "Griekenland",
    "Hungary": "Hongarije",
    "Iceland": "IJsland",
    "Ireland": "Ierland",
    "Italy": "Italië",
    "Latvia": "Letland",
    "Lithuania": "Litouwen",
    "Luxembourg": "Luxemburg",
    "Moldova": "Moldavië",
    "Netherlands": "Nederland",
    "North Macedonia": "Noord-Macedonië",
    "Northern Ireland": "Noord-Ierland",
    "Norway": "Noorwegen",
    "Poland": "Polen",
    "Romania": "Roemenië",
    "Russia": "Rusland",
    "Scotland": "Schotland",
    "Serbia": "Servië",
    "Slovakia": "Slowakije",
    "Slovenia": "Slovenië",
    "Spain": "Spanje",
    "Sweden": "Zweden",
    "Switzerland": "Zwitserland",
    "Turkey": "Turkije",
    "Ukraine": "Oekraïne",
    "United Kingdom": "Verenigd Koninkrijk",
}

# ---------- Cultural clues (keyed by English country name) ----------
CLUES: Dict[Language, Dict[str, str]] = {
    Language.EN: {
        "Austria": "Think waltzes, coffee houses and Mozart.",
        "Belgium": "Home of waffles, comics and the EU institutions.",
        "Czechia": "Famous for its astronomical clock and beer.",
        "Denmark": "The Little Mermaid watches over its harbour.",
        "France": "The Eiffel Tower rises above this city.",
        "Germany": "The Brandenburg Gate stands in its centre.",
        "Greece": "The Acropolis overlooks the city.",
        "Hungary": "The Danube splits it into two historic halves.",
        "Ireland": "Guinness is brewed here on the river Liffey.",
        "Italy": "The Colosseum and the Vatican are nearby.",
        "Netherlands": "Canals, bicycles and the Rijksmuseum.",
        "Norway": "The Viking Ship Museum is found here.",
        "Portugal": "Trams climb its seven hills above the Tagus.",
        "Spain": "Home of the Prado museum and Real Madrid.",
        "United Kingdom": "Big Ben stands by the Thames.",
    },
    Language.NL: {
        "Austria": "Denk aan walsen, koffiehuizen en Mozart.",
        "Belgium": "Thuis van wafels, strips en de EU-instellingen.",
        "Czechia": "Beroemd om de astronomische klok en bier.",
        "Denmark": "De Kleine Zeemeermin waakt over de haven.",
        "France": "De Eiffeltoren staat in deze stad.",
        "Germany": "De Brandenburger Tor staat in het centrum.",
        "Greece": "De Akropolis kijkt uit over de stad.",
        "Hungary": "De Donau verdeelt de stad in twee historische helften.",
        "Ireland": "Guinness wordt hier gebrouwen aan de Liffey.",
        "Italy": "Het Colosseum en Vaticaanstad liggen vlakbij.",
        "Netherlands": "Grachten, fietsen en het Rijksmuseum.",
        "Norway": "Hier vind je het Vikingschipmuseum.",
        "Portugal": "Trams beklimmen de zeven heuvels aan de Taag.",
        "Spain": "Thuis van het Prado en Real Madrid.",
        "United Kingdom": "De Big Ben staat aan de Theems.",
    },
}

GENERIC_CLUE: Dict[Language, str] = {
    Language.EN: "Think about the country's largest and best-known city.",
    Language.NL: "Denk aan de grootste en bekendste stad van het land.",
}

# ---------- UI strings ----------
UI: Dict[Language, Dict[str, str]] = {
    Language.EN: {
        "title": "European Capitals Quiz",
        "score": "Score",
        "total_capitals": "Total capitals",
        "accuracy": "Accuracy",
        "streak": "Streak",
        "language": "Language",
        "what_is_capital": "What is the capital of",
        "not_on_map": "Not shown on the map",
        "population": "Population",
        "enter_capital": "Enter the capital",
        "submit_answer": "Submit answer",
        "skip": "Skip",
        "hint": "Hint",
        "correct": "Correct!",
        "incorrect": "Incorrect.",
        "is_capital_of": "is the capital of",
        "capital_of": "The capital of",
        "is": "is",
        "region": "Region",
        "area": "Area",
        "coordinates": "Coordinates",
        "next_question": "Next question coming up...",
        "rolling_score": "Rolling Score",
        "last": "Last",
        "questions": "questions",
        "right": "Correct",
        "wrong": "Incorrect",
        "ends_with": "Ends with",
        "starts_with": "Starts with",
        "choose_one": "Pick one of",
        "celebration": "15 in a row without hints!",
        "close": "Close",
        "loading_failed": "Could not load the quiz data",
    },
    Language.NL: {
        "title": "Europese Hoofdsteden Quiz",
        "score": "Score",
        "total_capitals": "Totaal hoofdsteden",
        "accuracy": "Nauwkeurigheid",
        "streak": "Reeks",
        "language": "Taal",
        "what_is_capital": "Wat is de hoofdstad van",
        "not_on_map": "Niet op de kaart",
        "population": "Inwoners",
        "enter_capital": "Voer de hoofdstad in",
        "submit_answer": "Antwoord indienen",
        "skip": "Overslaan",
        "hint": "Hint",
        "correct": "Juist!",
        "incorrect": "Fout.",
        "is_capital_of": "is de hoofdstad van",
        "capital_of": "De hoofdstad van",
        "is": "is",
        "region": "Regio",
        "area": "Oppervlakte",
        "coordinates": "Coördinaten",
        "next_question": "Volgende vraag komt eraan...",
        "rolling_score": "Lopende Score",
        "last": "Laatste",
        "questions": "vragen",
        "right": "Juist",
        "wrong": "Fout",
        "ends_with": "Eindigt op",
        "starts_with": "Begint met",
        "choose_one": "Kies uit",
        "celebration": "15 op rij zonder hints!",
        "close": "Sluiten",
        "loading_failed": "De quizgegevens konden niet worden geladen",
    },
}


class Translator:
    """Lookup service for display names, clues and UI strings."""

    def __init__(
        self,
        capitals: Optional[Dict[Language, Dict[str, str]]] = None,
        countries: Optional[Dict[Language, Dict[str, str]]] = None,
        clues: Optional[Dict[Language, Dict[str, str]]] = None,
    ):
        self._capitals = capitals if capitals is not None else {Language.NL: CAPITALS_NL}
        self._countries = countries if countries is not None else {Language.NL: COUNTRIES_NL}
        self._clues = clues if clues is not None else CLUES

    def capital(self, language: Language, name: str) -> str:
        return self._capitals.get(language, {}).get(name) or name

    def country(self, language: Language, name: str) -> str:
        return self._countries.get(language, {}).get(name) or name

    def clue(self, language: Language, country: str) -> str:
        """Return the cultural clue registered for a country, or a generic one."""
        return self._clues.get(language, {}).get(country) or GENERIC_CLUE[language]

    def ui(self, language: Language, key: str) -> str:
        return UI[language].get(key) or UI[Language.EN].get(key) or key

    def canonical_capital(self, name: str) -> str:
        """Reverse lookup: map a display name in any language back to English.

        Matching is case-insensitive; unknown names are returned unchanged.
        """
        wanted = (name or "").strip().lower()
        for table in self._capitals.values():
            for canonical, translated in table.items():
                if translated.lower() == wanted or canonical.lower() == wanted:
                    return canonical
        return (name or "").strip()
