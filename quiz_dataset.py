"""Quiz dataset: capital records, the read-only store and loaders.

The dataset document is the JSON produced by the curation script::

    {
      "mapDimensions": {"width": 8505, "height": 10206},
      "capitals": [{"id": "FR", "country": "France", "capital": "Paris", ...}],
      "metadata": {"totalCapitals": 45, "mapBounds": {...}, ...}
    }
"""
import base64
import json
import logging
import mimetypes
import pathlib
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import requests

from quiz_config import HTTP_TIMEOUT_S, USER_AGENT
from quiz_translations import Language, Translator

logger = logging.getLogger(__name__)


class DataUnavailableError(Exception):
    """The dataset or the map image could not be loaded."""


class EmptyCollectionError(Exception):
    """The store holds no capitals to quiz on."""


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class MapDimensions:
    width: float
    height: float


@dataclass(frozen=True)
class MapBounds:
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0


@dataclass(frozen=True)
class GeoEntity:
    id: str
    capital: str
    country: str
    region: str = ""
    coordinates: Tuple[float, float] = (0.0, 0.0)
    # None when the capital lies outside the reference map
    map_position: Optional[Tuple[float, float]] = None
    population: int = 0
    area: float = 0.0
    flag: str = ""
    alternative_spellings: Tuple[str, ...] = ()
    difficulty: Difficulty = Difficulty.MEDIUM

    @property
    def on_map(self) -> bool:
        return self.map_position is not None

    @property
    def container_name(self) -> str:
        return self.country


@dataclass(frozen=True)
class QuizMetadata:
    total_capitals: int = 0
    calibrated_points: int = 0
    excluded_capitals: int = 0
    map_bounds: MapBounds = field(default_factory=MapBounds)
    generated_at: str = ""


@dataclass(frozen=True)
class QuizData:
    map_dimensions: MapDimensions
    capitals: Tuple[GeoEntity, ...]
    metadata: QuizMetadata = field(default_factory=QuizMetadata)


# ---------- Parsing ----------
def _parse_difficulty(value: str) -> Difficulty:
    try:
        return Difficulty((value or "").strip().lower())
    except ValueError:
        return Difficulty.MEDIUM


def parse_capital(raw: Dict) -> GeoEntity:
    """Build one GeoEntity from a dataset record.

    Raises KeyError/ValueError/TypeError/AttributeError for records that
    are not objects, miss the identity fields or carry malformed values.
    """
    if not isinstance(raw, dict):
        raise TypeError(f"capital record must be an object, got {type(raw).__name__}")
    coords = raw.get("coordinates") or {}
    position = raw.get("mapPosition")
    map_position: Optional[Tuple[float, float]] = None
    if position and not raw.get("offMap", False):
        map_position = (float(position["x"]), float(position["y"]))

    capital = str(raw["capital"]).strip()
    country = str(raw["country"]).strip()
    if not capital or not country:
        raise ValueError("capital and country must not be empty")

    return GeoEntity(
        id=str(raw.get("id") or capital),
        capital=capital,
        country=country,
        region=(raw.get("region") or "").strip(),
        coordinates=(float(coords.get("lat", 0.0)), float(coords.get("lng", 0.0))),
        map_position=map_position,
        population=int(raw.get("population") or 0),
        area=float(raw.get("area") or 0.0),
        flag=(raw.get("flag") or "").strip(),
        alternative_spellings=tuple(s for s in (raw.get("alternativeSpellings") or []) if s),
        difficulty=_parse_difficulty(raw.get("difficulty", "")),
    )


def parse_quiz_data(document: Dict) -> QuizData:
    """Validate a dataset document and turn it into QuizData.

    Malformed capital records are skipped with a warning; a document without
    usable map dimensions raises DataUnavailableError.
    """
    if not isinstance(document, dict):
        raise DataUnavailableError("dataset document must be a JSON object")
    dims = document.get("mapDimensions") or {}
    try:
        map_dimensions = MapDimensions(float(dims["width"]), float(dims["height"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise DataUnavailableError(f"dataset has no valid mapDimensions: {exc}") from exc
    if map_dimensions.width <= 0 or map_dimensions.height <= 0:
        raise DataUnavailableError("mapDimensions must be positive")

    records = document.get("capitals") or []
    if not isinstance(records, list):
        raise DataUnavailableError("dataset capitals must be a JSON array")

    capitals: List[GeoEntity] = []
    seen = set()
    for raw in records:
        try:
            entity = parse_capital(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Skipping malformed capital record %r: %s", raw, exc)
            continue
        if entity.id in seen:
            logger.warning("Skipping duplicate capital id %s", entity.id)
            continue
        seen.add(entity.id)
        capitals.append(entity)

    try:
        metadata = _parse_metadata(document.get("metadata") or {}, len(capitals))
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DataUnavailableError(f"dataset has malformed metadata: {exc}") from exc
    return QuizData(map_dimensions=map_dimensions, capitals=tuple(capitals), metadata=metadata)


def _parse_metadata(meta: Dict, capital_count: int) -> QuizMetadata:
    bounds = meta.get("mapBounds") or {}
    return QuizMetadata(
        total_capitals=int(meta.get("totalCapitals") or capital_count),
        calibrated_points=int(meta.get("calibratedPoints") or 0),
        excluded_capitals=int(meta.get("excludedCapitals") or 0),
        map_bounds=MapBounds(
            min_x=float(bounds.get("minX", 0.0)),
            max_x=float(bounds.get("maxX", 0.0)),
            min_y=float(bounds.get("minY", 0.0)),
            max_y=float(bounds.get("maxY", 0.0)),
        ),
        generated_at=str(meta.get("generatedAt") or ""),
    )


# ---------- Loading ----------
def _read_document(source: str) -> Dict:
    if source.startswith(("http://", "https://")):
        resp = requests.get(source, timeout=HTTP_TIMEOUT_S, headers={"User-Agent": USER_AGENT})
        resp.raise_for_status()
        return resp.json()
    return json.loads(pathlib.Path(source).read_text(encoding="utf-8"))


def load_quiz_data(source: str) -> QuizData:
    """Load the dataset from a local path or an http(s) URL.

    There is no retry and no fallback dataset: any failure is raised as
    DataUnavailableError for the shell to report.
    """
    try:
        document = _read_document(str(source))
    except (OSError, ValueError, requests.RequestException) as exc:
        logger.error("Failed to load quiz data from %s", source, exc_info=True)
        raise DataUnavailableError(f"could not load quiz data from {source}: {exc}") from exc
    data = parse_quiz_data(document)
    logger.info(
        "Loaded %d capitals (%d on the map) from %s",
        len(data.capitals),
        sum(1 for c in data.capitals if c.on_map),
        source,
    )
    return data


def load_map_image(path) -> str:
    """Read the reference map and return it as a data URI usable by Plotly."""
    path = pathlib.Path(path)
    try:
        payload = path.read_bytes()
    except OSError as exc:
        logger.error("Failed to load map image %s", path, exc_info=True)
        raise DataUnavailableError(f"could not load map image {path}: {exc}") from exc
    mime = mimetypes.guess_type(path.name)[0] or "image/png"
    return f"data:{mime};base64," + base64.b64encode(payload).decode("ascii")


# ---------- Store ----------
class CapitalStore:
    """Read-only collection of capitals with random selection."""

    def __init__(self, capitals, rng: Optional[random.Random] = None):
        self._capitals: Tuple[GeoEntity, ...] = tuple(capitals)
        self._by_id: Dict[str, GeoEntity] = {c.id: c for c in self._capitals}
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._capitals)

    def __iter__(self) -> Iterator[GeoEntity]:
        return iter(self._capitals)

    def __contains__(self, capital_id: str) -> bool:
        return capital_id in self._by_id

    def get(self, capital_id: str) -> GeoEntity:
        return self._by_id[capital_id]

    def select_random(self, exclude_id: Optional[str] = None) -> GeoEntity:
        """Pick a capital uniformly at random, off-map capitals included.

        With exclude_id the matching capital is avoided whenever another one
        exists.
        """
        if not self._capitals:
            raise EmptyCollectionError("no capitals loaded")
        choices = [c for c in self._capitals if c.id != exclude_id] if exclude_id else self._capitals
        if not choices:
            choices = self._capitals
        return self._rng.choice(choices)

    def same_country(self, entity: GeoEntity) -> List[GeoEntity]:
        return [c for c in self._capitals if c.country == entity.country and c.id != entity.id]

    def starting_with(
        self, letter: str, language: Language, translator: Translator, exclude_id: Optional[str] = None
    ) -> List[GeoEntity]:
        """Capitals whose translated name starts with letter (case-insensitive)."""
        letter = (letter or "").lower()
        if not letter:
            return []
        return [
            c for c in self._capitals
            if c.id != exclude_id and translator.capital(language, c.capital).lower().startswith(letter)
        ]
