"""Progressive hints and the score multiplier they cost.

Tier 0 is no hint. Each request moves one tier up, never past tier 3:

1. the last letter of the capital (in the display language)
2. the first letter plus a cultural clue about the country
3. a shuffled multiple-choice set
"""
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from quiz_config import CHOICE_COUNT, MAX_HINT_TIER
from quiz_dataset import CapitalStore, GeoEntity
from quiz_translations import Language, Translator

logger = logging.getLogger(__name__)

SCORE_MULTIPLIERS = {0: 1.0, 1: 0.75, 2: 0.5, 3: 0.25}


def score_multiplier(tier: int) -> float:
    """Credit earned by a correct answer given with hints up to tier."""
    return SCORE_MULTIPLIERS[max(0, min(tier, MAX_HINT_TIER))]


def next_tier(current: int) -> int:
    """The tier after current; stays put once the last tier is reached."""
    if current >= MAX_HINT_TIER:
        return current
    return current + 1


@dataclass(frozen=True)
class Hint:
    tier: int
    last_letter: str = ""
    first_letter: str = ""
    clue: str = ""
    choices: Tuple[str, ...] = ()

    def lines(self, translator: Translator, language: Language) -> List[str]:
        """Human readable hint lines, strongest last."""
        out: List[str] = []
        if self.last_letter:
            out.append(f"{translator.ui(language, 'ends_with')} '{self.last_letter}'")
        if self.first_letter:
            out.append(f"{translator.ui(language, 'starts_with')} '{self.first_letter}'")
        if self.clue:
            out.append(self.clue)
        if self.choices:
            out.append(f"{translator.ui(language, 'choose_one')}: " + " / ".join(self.choices))
        return out


def choose_alternatives(
    entity: GeoEntity,
    store: CapitalStore,
    translator: Translator,
    language: Language,
    rng: Optional[random.Random] = None,
    count: int = CHOICE_COUNT,
) -> List[GeoEntity]:
    """Pick the multiple-choice set for entity, shuffled.

    The set holds the correct capital, one capital from the same country and
    one sharing the first letter when such capitals exist, and random
    capitals for the remaining slots. Display names are kept distinct, so a
    tiny store can yield fewer than count options.
    """
    rng = rng or random.Random()
    name = translator.capital(language, entity.capital)
    options = [entity]
    names = {name.lower()}

    def _add_one(candidates: Sequence[GeoEntity]) -> None:
        fresh = [c for c in candidates if translator.capital(language, c.capital).lower() not in names]
        if fresh and len(options) < count:
            pick = rng.choice(fresh)
            options.append(pick)
            names.add(translator.capital(language, pick.capital).lower())

    _add_one(store.same_country(entity))
    _add_one(store.starting_with(name[:1], language, translator, exclude_id=entity.id))

    pool = [c for c in store if c.id != entity.id]
    rng.shuffle(pool)
    for candidate in pool:
        if len(options) >= count:
            break
        candidate_name = translator.capital(language, candidate.capital).lower()
        if candidate_name in names:
            continue
        options.append(candidate)
        names.add(candidate_name)

    rng.shuffle(options)
    return options


def build_hint(
    tier: int,
    entity: GeoEntity,
    translator: Translator,
    language: Language,
    choices: Sequence[GeoEntity] = (),
) -> Optional[Hint]:
    """Everything revealed up to tier; None at tier 0."""
    if tier <= 0:
        return None
    name = translator.capital(language, entity.capital)
    fields = {"last_letter": name[-1:]}
    if tier >= 2:
        fields["first_letter"] = name[:1]
        fields["clue"] = translator.clue(language, entity.container_name)
    if tier >= 3:
        fields["choices"] = tuple(translator.capital(language, c.capital) for c in choices)
    logger.debug("Hint tier %d for %s", tier, entity.id)
    return Hint(tier=tier, **fields)
