# kennel_app/api/growth/test_growth.py
from datetime import date

from kennel_app.services.firestore_service import GROWTH_EVENTS


def test_events_are_listed_newest_first(app, tables, seed_dog):
    seed_dog('a', name='Coco')
    tables[GROWTH_EVENTS].insert({'dog_id': 'a', 'event_date': date(2024, 1, 1), 'notes': '첫 산책'})
    tables[GROWTH_EVENTS].insert({'dog_id': 'a', 'event_date': date(2024, 2, 1), 'notes': '2kg 돌파'})

    events = app.services['growth'].list_events(dog_id='a')

    assert [e['notes'] for e in events] == ['2kg 돌파', '첫 산책']
    assert events[0]['dog']['name'] == 'Coco'


def test_growth_routes(client, auth_headers, seed_dog):
    seed_dog('a')

    created = client.post('/api/growth/events', headers=auth_headers, json={
        'dog_id': 'a', 'event_date': '2024-05-05', 'photo_url': 'https://cdn.example.com/a.jpg',
    })
    assert created.status_code == 201
    event_id = created.get_json()['id']

    listed = client.get('/api/growth/events?start_date=2024-05-01&end_date=2024-05-31', headers=auth_headers)
    assert [e['id'] for e in listed.get_json()] == [event_id]

    assert client.delete(f'/api/growth/events/{event_id}', headers=auth_headers).status_code == 204
    assert client.delete(f'/api/growth/events/{event_id}', headers=auth_headers).status_code == 404


def test_event_for_missing_dog_returns_404(client, auth_headers):
    response = client.post('/api/growth/events', headers=auth_headers,
                           json={'dog_id': 'ghost', 'event_date': '2024-05-05'})
    assert response.status_code == 404
