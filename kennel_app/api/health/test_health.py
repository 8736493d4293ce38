# kennel_app/api/health/test_health.py
"""
건강 기록 서비스 / API 테스트
"""

from datetime import timedelta

from kennel_app.services.firestore_service import HEALTH_RECORDS
from kennel_app.utils.datetime_utils import DateTimeUtils


def days_ago(days):
    return DateTimeUtils.today() - timedelta(days=days)


def test_stats_counts_recent_records_and_flags_unchecked_dogs(app, tables, seed_dog):
    seed_dog('a', name='Coco')
    seed_dog('b', name='Bori')
    records = tables[HEALTH_RECORDS]
    records.insert({'dog_id': 'a', 'type': 'vaccination', 'date': days_ago(30), 'description': '종합백신'})
    records.insert({'dog_id': 'a', 'type': 'vaccination', 'date': days_ago(400), 'description': '광견병'})
    records.insert({'dog_id': 'a', 'type': 'checkup', 'date': days_ago(10), 'description': '정기검진'})
    records.insert({'dog_id': 'b', 'type': 'checkup', 'date': days_ago(120), 'description': '정기검진'})
    records.insert({'dog_id': 'b', 'type': 'treatment', 'date': days_ago(200), 'description': '피부염', 'cost': 50})

    stats = app.services['health'].get_stats()

    assert stats['total_records'] == 5
    assert stats['recent_vaccinations'] == 1
    assert stats['recent_checkups'] == 1
    assert stats['treatment_count'] == 1
    assert stats['dogs_needing_attention'] == []

    stats_b = app.services['health'].get_stats(dog_id='b')
    assert stats_b['total_records'] == 2
    assert stats_b['dogs_needing_attention'] == []


def test_dog_without_recent_records_needs_attention(app, tables, seed_dog):
    seed_dog('a', name='Coco')
    seed_dog('b', name='Bori')
    tables[HEALTH_RECORDS].insert({'dog_id': 'a', 'type': 'checkup', 'date': days_ago(5), 'description': 'ok'})
    tables[HEALTH_RECORDS].insert({'dog_id': 'b', 'type': 'checkup', 'date': days_ago(300), 'description': 'old'})

    stats = app.services['health'].get_stats()

    assert stats['dogs_needing_attention'] == ['Bori']


def test_list_records_filters_by_type(app, tables, seed_dog):
    seed_dog('a')
    tables[HEALTH_RECORDS].insert({'dog_id': 'a', 'type': 'checkup', 'date': days_ago(5), 'description': 'c'})
    tables[HEALTH_RECORDS].insert({'dog_id': 'a', 'type': 'treatment', 'date': days_ago(3), 'description': 't'})

    records = app.services['health'].list_records(type='treatment')

    assert [r['description'] for r in records] == ['t']
    assert records[0]['dog']['name'] == 'dog-a'


def test_health_routes(client, auth_headers, seed_dog):
    seed_dog('a')

    created = client.post('/api/health/records', headers=auth_headers, json={
        'dog_id': 'a', 'type': 'vaccination', 'date': '2024-04-01',
        'description': '종합백신 2차', 'cost': 35000,
    })
    assert created.status_code == 201
    record_id = created.get_json()['id']

    listed = client.get('/api/health/records?dog_id=a&type=vaccination', headers=auth_headers)
    assert [r['id'] for r in listed.get_json()] == [record_id]

    stats = client.get('/api/health/stats', headers=auth_headers)
    assert stats.status_code == 200
    assert stats.get_json()['total_records'] == 1

    assert client.delete(f'/api/health/records/{record_id}', headers=auth_headers).status_code == 204


def test_invalid_record_type_returns_400(client, auth_headers, seed_dog):
    seed_dog('a')
    response = client.post('/api/health/records', headers=auth_headers, json={
        'dog_id': 'a', 'type': 'surgery', 'date': '2024-04-01', 'description': 'x',
    })
    assert response.status_code == 400
