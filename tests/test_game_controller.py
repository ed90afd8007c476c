import datetime
import random
import threading

import pytest

from boluxiones import create_app
from boluxiones.config.app_config import TestingConfig
from boluxiones.models.catalog import Catalog
from boluxiones.services import game_service as game_service_module
from boluxiones.services.game_service import initialize_game_service
from boluxiones.services.storage_service import MemorySessionStore, SessionGateway

from conftest import GROUP_A, ManualClock, make_catalog


class StubCatalogService:
    def __init__(self, catalogs):
        self.catalogs = list(catalogs)
        self.calls = []

    def load(self, game_date):
        self.calls.append(game_date)
        if len(self.catalogs) > 1:
            return self.catalogs.pop(0)
        return self.catalogs[0]


class Today:
    def __init__(self, day):
        self.day = day

    def __call__(self):
        return self.day


@pytest.fixture
def today():
    return Today(datetime.date(2024, 5, 1))


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def make_service(today, clock):
    def factory(*catalogs):
        return initialize_game_service(
            StubCatalogService(catalogs or [make_catalog()]),
            SessionGateway(MemorySessionStore()),
            shuffle_initial=False,
            clock=clock,
            today=today,
            rng=random.Random(7),
        )
    yield factory
    game_service_module._game_service = None


@pytest.fixture
def client(make_service):
    service = make_service()
    app, _ = create_app(TestingConfig, service)
    return app.test_client()


def select(client, word, selected=True):
    return client.post('/api/game/select', json={'word': word, 'selected': selected})


def test_state(client):
    response = client.get('/api/game/state')
    assert response.status_code == 200
    board = response.get_json()['board']
    assert board['date_key'] == '2024-05-01'
    assert board['catalog_status'] == 'loaded'
    assert [tile['word'] for tile in board['tiles']][:4] == GROUP_A


def test_select_and_deselect(client):
    data = select(client, 'w1').get_json()
    assert data['changed'] is True
    assert data['board']['selected_words'] == ['w1']

    data = select(client, 'w1', selected=False).get_json()
    assert data['board']['selected_words'] == []


def test_select_requires_word(client):
    response = client.post('/api/game/select', json={})
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_submit_correct_group(client):
    for word in GROUP_A:
        select(client, word)
    response = client.post('/api/game/submit')
    assert response.status_code == 200
    data = response.get_json()
    assert data['attempt'] == {'words': GROUP_A, 'correct': True, 'submitted_by': 'user'}
    assert [s['group'] for s in data['board']['solutions']] == ['A']


def test_submit_needs_four_words(client):
    select(client, 'w1')
    response = client.post('/api/game/submit')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Exactly 4 words must be selected'


def test_deselect_all_and_shuffle(client):
    select(client, 'w1')
    assert client.post('/api/game/deselect_all').get_json()['board']['selected_words'] == []
    assert client.post('/api/game/shuffle').get_json()['changed'] is True


def test_share(client):
    for word in GROUP_A:
        select(client, word)
    client.post('/api/game/submit')
    data = client.get('/api/game/share').get_json()
    assert data['emoji_representation'] == [['🟨'] * 4]
    assert data['text'] == 'Boluxiones 2024-05-01\n🟨🟨🟨🟨'


def test_reload_after_failure(make_service):
    service = make_service(Catalog.failed('offline'), make_catalog())
    app, _ = create_app(TestingConfig, service)
    client = app.test_client()

    assert client.get('/api/game/state').get_json()['board']['tiles'] == []
    response = client.post('/api/game/reload')
    assert response.status_code == 200
    assert len(response.get_json()['board']['tiles']) == 16


def test_reload_still_failing(make_service):
    service = make_service(Catalog.failed('offline'))
    app, _ = create_app(TestingConfig, service)
    response = app.test_client().post('/api/game/reload')
    assert response.status_code == 503
    assert response.get_json()['error'] == 'offline'


def test_health(client):
    data = client.get('/api/health').get_json()
    assert data['status'] == 'healthy'
    assert data['catalog_status'] == 'loaded'


def test_service_unavailable():
    game_service_module._game_service = None
    app, _ = create_app(TestingConfig)
    response = app.test_client().get('/api/game/state')
    assert response.status_code == 500


def test_day_rollover_starts_new_session(make_service, today):
    service = make_service()
    service.set_selected('w1', True)
    assert service.get_board().selected_words == ['w1']

    today.day = datetime.date(2024, 5, 2)
    board = service.get_board()
    assert board.date_key == '2024-05-02'
    assert board.selected_words == []
    assert service.catalog_service.calls == [datetime.date(2024, 5, 1), datetime.date(2024, 5, 2)]


def test_tile_handlers_wait_for_the_service_lock(make_service):
    service = make_service()
    board = service.get_board()

    with service._lock:
        worker = threading.Thread(target=board.tiles[0].set_selected, args=(True,))
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert service.engine.session.selected_words == ()

    worker.join(timeout=5)
    assert service.get_board().selected_words == ['w1']
