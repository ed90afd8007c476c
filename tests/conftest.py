import os
import random
import tempfile

os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "boluxiones-test-logs"))

import pytest

from boluxiones.models.catalog import Catalog
from boluxiones.models.game import Grouping
from boluxiones.services.game_engine import GameEngine
from boluxiones.services.scheduler import Scheduler
from boluxiones.services.storage_service import MemorySessionStore, SessionGateway

DATE_KEY = "2024-05-01"

WORDS = [f"w{index}" for index in range(1, 17)]
GROUP_A = WORDS[0:4]
GROUP_B = WORDS[4:8]
GROUP_C = WORDS[8:12]
GROUP_D = WORDS[12:16]


class ManualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


class RecordingSink:
    def __init__(self):
        self.events = []

    def track(self, event, properties):
        self.events.append((event, properties))


def make_catalog():
    return Catalog.loaded([
        Grouping("D", 4, tuple(GROUP_D)),
        Grouping("A", 1, tuple(GROUP_A)),
        Grouping("C", 3, tuple(GROUP_C)),
        Grouping("B", 2, tuple(GROUP_B)),
    ], DATE_KEY)


def select_and_submit(engine, words):
    for word in words:
        engine.select_word(word)
    return engine.submit()


def advance(engine, clock, ms):
    clock.advance(ms)
    engine.run_due()


@pytest.fixture
def catalog():
    return make_catalog()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def gateway(store):
    return SessionGateway(store)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def one_away_calls():
    return []


@pytest.fixture
def make_engine(catalog, clock, gateway, sink, one_away_calls):
    def factory(date_key=DATE_KEY, catalog=catalog, gateway=gateway, analytics=sink):
        return GameEngine(
            date_key,
            catalog=catalog,
            gateway=gateway,
            scheduler=Scheduler(clock),
            rng=random.Random(7),
            one_away_fn=lambda: one_away_calls.append(True),
            analytics=analytics,
        )
    return factory


@pytest.fixture
def engine(make_engine):
    game = make_engine()
    game.initialize(shuffle=False)
    return game
