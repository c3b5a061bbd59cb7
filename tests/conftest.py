import random

import pytest

from quiz_dataset import CapitalStore, GeoEntity, MapDimensions
from quiz_scheduler import Scheduler
from quiz_session import QuizSession
from quiz_translations import Language, Translator


class ManualClock:
    """Clock the tests move by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingCanvas:
    """Canvas that remembers what the last frame drew."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.image = None
        self.circles = []
        self.clears = 0

    def clear(self):
        self.image = None
        self.circles = []
        self.clears += 1

    def draw_image(self, source):
        self.image = source

    def draw_circle(self, x, y, radius, fill=None, stroke=None, line_width=1.0):
        self.circles.append(dict(x=x, y=y, radius=radius, fill=fill, stroke=stroke, line_width=line_width))


def make_capital(capital_id, capital, country, position=(100.0, 200.0), alternatives=(), **kwargs):
    return GeoEntity(
        id=capital_id,
        capital=capital,
        country=country,
        map_position=position,
        alternative_spellings=tuple(alternatives),
        **kwargs,
    )


@pytest.fixture
def capitals():
    return [
        make_capital("FR", "Paris", "France", (1000.0, 2000.0), ["Lutetia"]),
        make_capital("DE", "Berlin", "Germany", (2000.0, 1000.0)),
        make_capital("NL", "Amsterdam", "Netherlands", (1500.0, 1200.0)),
        make_capital("BE", "Brussels", "Belgium", (1400.0, 1500.0), ["Bruxelles"]),
        make_capital("AT", "Vienna", "Austria", (2500.0, 2500.0), ["Wien"]),
        make_capital("PL", "Warsaw", "Poland", (3000.0, 1100.0)),
        make_capital("PT", "Lisbon", "Portugal", (200.0, 4000.0)),
        make_capital("RU", "Moscow", "Russia", None),
    ]


@pytest.fixture
def map_dimensions():
    return MapDimensions(4000.0, 5000.0)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock=clock)


@pytest.fixture
def translator():
    return Translator()


@pytest.fixture
def store(capitals):
    return CapitalStore(capitals, rng=random.Random(7))


@pytest.fixture
def session(store, translator, scheduler):
    return QuizSession(store, translator, scheduler, language=Language.EN, rng=random.Random(3))


@pytest.fixture
def canvas():
    return RecordingCanvas(400, 500)
