# kennel_app/api/breeding/test_breeding.py
"""
번식 기록 서비스 / API 테스트
"""

from datetime import date

import pytest

from kennel_app.api.dogs.services import PedigreeCycleError
from kennel_app.services.firestore_service import DOGS, LITTERS


@pytest.fixture
def parents(seed_dog):
    seed_dog('sire', name='Max', gender='male')
    seed_dog('dam', name='Bella', gender='female')


def test_create_litter_attaches_parent_summaries(app, parents):
    litter = app.services['breeding'].create_litter({
        'sire_id': 'sire', 'dam_id': 'dam', 'mating_date': date(2024, 1, 10),
        'expected_birth_date': date(2024, 3, 13),
    })

    assert litter['birth_date'] is None
    assert litter['sire']['name'] == 'Max'
    assert litter['dam']['name'] == 'Bella'


def test_create_litter_requires_matching_genders(app, parents):
    with pytest.raises(ValueError):
        app.services['breeding'].create_litter({'sire_id': 'dam', 'dam_id': 'sire'})


def test_record_birth_links_puppies(app, parents, seed_dog, tables, state):
    seed_dog('p1')
    seed_dog('p2')
    app.services['dogs'].refresh_dogs()
    breeding = app.services['breeding']
    litter = breeding.create_litter({'sire_id': 'sire', 'dam_id': 'dam'})

    result = breeding.record_birth(litter['id'], {'birth_date': date(2024, 3, 12), 'puppy_ids': ['p1', 'p2', 'p1']})

    assert result['puppy_ids'] == ['p1', 'p2']
    assert result['puppy_count'] == 2
    for puppy_id in ('p1', 'p2'):
        assert tables[DOGS].get(puppy_id)['sire_id'] == 'sire'
        assert state.get_dog(puppy_id).dam_id == 'dam'


def test_explicit_puppy_count_is_kept(app, parents):
    breeding = app.services['breeding']
    litter = breeding.create_litter({'sire_id': 'sire', 'dam_id': 'dam'})

    result = breeding.record_birth(litter['id'], {'birth_date': date(2024, 3, 12), 'puppy_count': 5})

    assert result['puppy_count'] == 5


def test_list_litters_by_parent_and_birth_state(app, parents, seed_dog, tables):
    seed_dog('other_sire', gender='male')
    tables[LITTERS].insert({'sire_id': 'sire', 'dam_id': 'dam', 'birth_date': date(2024, 1, 1), 'puppy_ids': []}, doc_id='l1')
    tables[LITTERS].insert({'sire_id': 'other_sire', 'dam_id': 'dam', 'puppy_ids': []}, doc_id='l2')
    tables[LITTERS].insert({'sire_id': 'other_sire', 'dam_id': 'x', 'puppy_ids': []}, doc_id='l3')

    breeding = app.services['breeding']

    assert {l['id'] for l in breeding.list_litters(parent_id='dam')} == {'l1', 'l2'}
    assert {l['id'] for l in breeding.list_litters(parent_id='sire')} == {'l1'}
    assert {l['id'] for l in breeding.list_litters(born=False)} == {'l2', 'l3'}


def test_birth_with_parent_as_puppy_leaves_litter_unchanged(app, parents, tables):
    tables[LITTERS].insert({'sire_id': 'sire', 'dam_id': 'dam', 'puppy_ids': []}, doc_id='l1')

    with pytest.raises(PedigreeCycleError):
        app.services['breeding'].record_birth('l1', {'birth_date': date(2024, 3, 12), 'puppy_ids': ['sire']})

    stored = tables[LITTERS].get('l1')
    assert stored['puppy_ids'] == []
    assert stored.get('birth_date') is None


def test_create_litter_rejects_parent_as_puppy(app, parents, tables):
    with pytest.raises(PedigreeCycleError):
        app.services['breeding'].create_litter({'sire_id': 'sire', 'dam_id': 'dam', 'puppy_ids': ['dam']})

    assert tables[LITTERS].list() == []


def test_birth_without_puppy_ids_keeps_stored_puppies(app, parents, seed_dog):
    seed_dog('p1')
    breeding = app.services['breeding']
    litter = breeding.create_litter({'sire_id': 'sire', 'dam_id': 'dam', 'puppy_ids': ['p1']})

    result = breeding.record_birth(litter['id'], {'birth_date': date(2024, 3, 12)})

    assert result['puppy_ids'] == ['p1']
    assert result['puppy_count'] == 1


def test_puppy_count_below_stored_puppies_is_rejected(app, parents, seed_dog, tables):
    seed_dog('p1')
    seed_dog('p2')
    tables[LITTERS].insert({'sire_id': 'sire', 'dam_id': 'dam', 'puppy_ids': ['p1', 'p2']}, doc_id='l1')

    with pytest.raises(ValueError):
        app.services['breeding'].record_birth('l1', {'birth_date': date(2024, 3, 12), 'puppy_count': 1})

    assert tables[LITTERS].get('l1').get('puppy_count') is None


# ----------------------------------------------------------------------
# API
# ----------------------------------------------------------------------
def test_litter_routes(client, auth_headers, parents):
    created = client.post('/api/breeding/litters', headers=auth_headers, json={
        'sire_id': 'sire', 'dam_id': 'dam', 'mating_date': '2024-01-10',
    })
    assert created.status_code == 201
    litter_id = created.get_json()['id']

    born = client.patch(f'/api/breeding/litters/{litter_id}', headers=auth_headers,
                        json={'birth_date': '2024-03-12', 'puppy_count': 4})
    assert born.status_code == 200
    assert born.get_json()['birth_date'] == '2024-03-12'

    listed = client.get('/api/breeding/litters?born=true', headers=auth_headers)
    assert [l['id'] for l in listed.get_json()] == [litter_id]

    assert client.delete(f'/api/breeding/litters/{litter_id}', headers=auth_headers).status_code == 204


def test_same_parent_twice_is_validation_error(client, auth_headers, parents):
    response = client.post('/api/breeding/litters', headers=auth_headers,
                           json={'sire_id': 'sire', 'dam_id': 'sire'})
    assert response.status_code == 400


def test_birth_for_missing_litter_returns_404(client, auth_headers):
    response = client.patch('/api/breeding/litters/ghost', headers=auth_headers,
                            json={'birth_date': '2024-03-12'})
    assert response.status_code == 404


def test_birth_with_unknown_puppy_returns_404(client, auth_headers, parents, tables):
    tables[LITTERS].insert({'sire_id': 'sire', 'dam_id': 'dam', 'puppy_ids': []}, doc_id='l1')
    response = client.patch('/api/breeding/litters/l1', headers=auth_headers,
                            json={'birth_date': '2024-03-12', 'puppy_ids': ['ghost']})
    assert response.status_code == 404


def test_birth_route_with_dam_as_puppy_returns_400(client, auth_headers, parents, tables):
    tables[LITTERS].insert({'sire_id': 'sire', 'dam_id': 'dam', 'puppy_ids': []}, doc_id='l1')

    response = client.patch('/api/breeding/litters/l1', headers=auth_headers,
                            json={'birth_date': '2024-03-12', 'puppy_ids': ['dam']})

    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'PEDIGREE_CYCLE'
    assert tables[LITTERS].get('l1')['puppy_ids'] == []
