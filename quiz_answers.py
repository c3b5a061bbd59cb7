"""Answer checking for typed capital names."""
from quiz_dataset import GeoEntity


def normalize_answer(text: str) -> str:
    """Lower-case and trim surrounding whitespace; interior spacing is kept."""
    return (text or "").strip().lower()


def is_correct_answer(raw: str, entity: GeoEntity, translated_capital: str) -> bool:
    """Return True when raw is accepted as the capital of entity.

    Accepted: the English name, the name in the display language, any of the
    alternative spellings, or anything that contains or is contained in the
    English or translated name. The containment rule accepts
    partial typing such as "par" for Paris as well as "parisian".
    """
    answer = normalize_answer(raw)
    if not answer:
        return False

    english = entity.capital.lower()
    translated = (translated_capital or entity.capital).lower()
    alternatives = [s.lower() for s in entity.alternative_spellings]

    return (
        answer == english
        or answer == translated
        or answer in alternatives
        or answer in english
        or answer in translated
        or english in answer
        or translated in answer
    )
