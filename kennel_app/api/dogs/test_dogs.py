# kennel_app/api/dogs/test_dogs.py
"""
견 프로필 서비스 / API 테스트
"""

import pytest

from kennel_app.models.dog import DogStatus
from kennel_app.services.firestore_service import DOGS, RecordNotFoundError
from kennel_app.store.state_store import RequestGenerations
from .services import DogService, PedigreeCycleError

NEW_DOG = {
    'name': '초코',
    'breed': 'Maltese',
    'gender': 'male',
    'birth_date': '2023-04-01',
    'color': 'white',
    'weight': 3.2,
}


@pytest.fixture
def dog_service(app):
    return app.services['dogs']


# ----------------------------------------------------------------------
# 서비스
# ----------------------------------------------------------------------
def test_refresh_replaces_roster(dog_service, state, seed_dog):
    seed_dog('a')
    seed_dog('b', status='sold')

    dogs = dog_service.refresh_dogs()

    assert {dog.id for dog in dogs} == {'a', 'b'}
    assert {dog.id for dog in state.dogs} == {'a', 'b'}
    assert state.is_loading is False


def test_filtered_refresh_does_not_touch_roster(dog_service, state, seed_dog):
    seed_dog('a')
    seed_dog('b', status='sold')
    dog_service.refresh_dogs()

    sold = dog_service.refresh_dogs(status='sold')

    assert [dog.id for dog in sold] == ['b']
    assert len(state.dogs) == 2


def test_refresh_name_search_is_case_insensitive(dog_service, seed_dog):
    seed_dog('a', name='Coco')
    seed_dog('b', name='Bori')

    assert [dog.id for dog in dog_service.refresh_dogs(q='co')] == ['a']


def test_superseded_refresh_is_discarded(app, state, seed_dog):
    seed_dog('a')
    generations = RequestGenerations()
    service = DogService(state, app.services['tables'], generations=generations)

    class SlowTable:
        """첫 조회 도중 더 최근 조회가 시작된 상황을 흉내 냅니다."""
        def __init__(self, inner):
            self.inner = inner

        def list(self, **kwargs):
            generations.begin(DOGS)
            return self.inner.list(**kwargs)

        def __getattr__(self, name):
            return getattr(self.inner, name)

    service.tables = dict(app.services['tables'], **{DOGS: SlowTable(app.services['tables'][DOGS])})

    dogs = service.refresh_dogs()

    assert [dog.id for dog in dogs] == ['a']
    assert state.dogs == []


def test_refresh_failure_records_error(dog_service, state, fake_db):
    fake_db.fail_queries = True

    with pytest.raises(Exception):
        dog_service.refresh_dogs()

    assert state.last_error == "요청 시간이 초과되었습니다. 네트워크 연결을 확인해주세요."
    assert state.is_loading is False


def test_create_dog_adds_to_roster(dog_service, state):
    dog = dog_service.create_dog({'name': 'Coco', 'breed': 'Poodle', 'gender': 'female',
                                  'birth_date': '2023-01-01', 'color': 'brown'})

    assert dog.status is DogStatus.OWNED
    assert state.get_dog(dog.id) == dog


def test_update_dog_syncs_roster_and_selection(dog_service, state, seed_dog):
    seed_dog('a')
    dog_service.refresh_dogs()
    state.set_selected_dog(state.get_dog('a'))

    updated = dog_service.update_dog('a', {'weight': 5.5, 'status': 'sold'})

    assert updated.weight == 5.5
    assert state.get_dog('a').status is DogStatus.SOLD
    assert state.selected_dog == state.get_dog('a')


def test_update_dog_rejects_empty_payload(dog_service, seed_dog):
    seed_dog('a')
    with pytest.raises(ValueError):
        dog_service.update_dog('a', {})


def test_update_missing_dog_raises_not_found(dog_service):
    with pytest.raises(RecordNotFoundError):
        dog_service.update_dog('ghost', {'name': 'x'})


def test_delete_dog_clears_selection(dog_service, state, seed_dog):
    seed_dog('a')
    dog_service.refresh_dogs()
    state.set_selected_dog(state.get_dog('a'))

    dog_service.delete_dog('a')

    assert state.get_dog('a') is None
    assert state.selected_dog is None


def test_dog_cannot_be_its_own_parent(dog_service, seed_dog):
    seed_dog('a')
    with pytest.raises(PedigreeCycleError):
        dog_service.update_dog('a', {'sire_id': 'a'})


def test_ancestor_cannot_become_child(dog_service, seed_dog):
    # grand -> parent -> child 계보에서 grand 의 부견으로 child 를 지정하면 순환
    seed_dog('grand', gender='male')
    seed_dog('parent', gender='male', sire_id='grand')
    seed_dog('child', gender='male', sire_id='parent')

    with pytest.raises(PedigreeCycleError):
        dog_service.update_dog('grand', {'sire_id': 'child'})


def test_unknown_parent_is_rejected(dog_service):
    with pytest.raises(ValueError):
        dog_service.validate_parentage(None, 'ghost', None)


def test_same_sire_and_dam_is_rejected(dog_service, seed_dog):
    seed_dog('p')
    with pytest.raises(ValueError):
        dog_service.validate_parentage(None, 'p', 'p')


def test_pedigree_tree_has_three_generations(dog_service, seed_dog):
    seed_dog('gs', gender='male')
    seed_dog('gd')
    seed_dog('sire', gender='male', sire_id='gs', dam_id='gd')
    seed_dog('dam')
    seed_dog('pup', sire_id='sire', dam_id='dam')

    tree = dog_service.get_pedigree('pup')

    assert tree['dog']['id'] == 'pup'
    assert tree['sire']['dog']['id'] == 'sire'
    assert tree['sire']['sire']['dog']['id'] == 'gs'
    assert tree['sire']['dam']['dog']['id'] == 'gd'
    assert tree['dam']['sire'] is None
    # 세 번째 세대에서 멈춤
    assert tree['sire']['sire']['sire'] is None


def test_find_dog_prefers_roster(dog_service, state, seed_dog, tables):
    seed_dog('a', name='remote')
    dog_service.refresh_dogs()
    tables[DOGS].update('a', {'name': 'changed remotely'})

    assert dog_service.find_dog('a').name == 'remote'


# ----------------------------------------------------------------------
# API
# ----------------------------------------------------------------------
def test_routes_require_token(client):
    assert client.get('/api/dogs/').status_code == 401


def test_create_and_get_dog(client, auth_headers):
    created = client.post('/api/dogs/', json=NEW_DOG, headers=auth_headers)
    assert created.status_code == 201
    body = created.get_json()
    assert body['status'] == 'owned'
    assert body['birth_date'] == '2023-04-01'

    fetched = client.get(f"/api/dogs/{body['id']}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.get_json()['name'] == '초코'


def test_create_dog_validation_error(client, auth_headers):
    response = client.post('/api/dogs/', json={'name': ''}, headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'VALIDATION_ERROR'


def test_create_dog_with_unknown_parent(client, auth_headers):
    response = client.post('/api/dogs/', json=dict(NEW_DOG, sire_id='ghost'), headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'INVALID_PARENT'


def test_patch_dog_cycle_returns_400(client, auth_headers, seed_dog):
    seed_dog('parent', gender='male')
    seed_dog('child', sire_id='parent')

    response = client.patch('/api/dogs/parent', json={'sire_id': 'child'}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'PEDIGREE_CYCLE'


def test_get_missing_dog_returns_404(client, auth_headers):
    response = client.get('/api/dogs/ghost', headers=auth_headers)
    assert response.status_code == 404


def test_list_and_delete(client, auth_headers, seed_dog, state):
    seed_dog('a')
    seed_dog('b')

    listed = client.get('/api/dogs/', headers=auth_headers)
    assert listed.status_code == 200
    assert {dog['id'] for dog in listed.get_json()} == {'a', 'b'}

    assert client.delete('/api/dogs/a', headers=auth_headers).status_code == 204
    assert client.delete('/api/dogs/a', headers=auth_headers).status_code == 404
    assert [dog.id for dog in state.dogs] == ['b']


def test_pedigree_route_depth(client, auth_headers, seed_dog):
    seed_dog('sire', gender='male')
    seed_dog('pup', sire_id='sire')

    response = client.get('/api/dogs/pup/pedigree?depth=1', headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json()['sire'] is None
