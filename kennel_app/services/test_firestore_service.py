# kennel_app/services/test_firestore_service.py
"""
원격 테이블 클라이언트 테스트 (메모리 Firestore 대역 사용)
"""

from datetime import date, datetime, timezone

import pytest
from google.api_core import exceptions as google_exceptions

from kennel_app.services.firestore_service import (
    ALL_TABLES, DOGS, HEALTH_RECORDS, RecordNotFoundError, TableClient,
    build_tables, describe_remote_error
)


@pytest.fixture
def dogs(fake_db):
    return TableClient(DOGS, db=fake_db)


def test_insert_assigns_id_and_created_at(dogs):
    row = dogs.insert({'name': 'Coco', 'birth_date': date(2023, 5, 1)})

    assert row['id']
    assert isinstance(row['created_at'], datetime)
    assert row['birth_date'] == datetime(2023, 5, 1, tzinfo=timezone.utc)
    assert dogs.get(row['id'])['name'] == 'Coco'


def test_insert_respects_given_id(dogs):
    row = dogs.insert({'name': 'Bori'}, doc_id='dog-1')
    assert row['id'] == 'dog-1'
    assert dogs.get('dog-1')['id'] == 'dog-1'


def test_get_missing_returns_none(dogs):
    assert dogs.get('nope') is None


def test_get_many_skips_missing_and_empty_ids(dogs):
    dogs.insert({'name': 'A'}, doc_id='a')
    dogs.insert({'name': 'B'}, doc_id='b')

    found = dogs.get_many(['a', None, 'missing', 'b', 'a'])

    assert set(found) == {'a', 'b'}


def test_update_stamps_updated_at(dogs):
    dogs.insert({'name': 'Coco', 'weight': 3.0}, doc_id='c')

    row = dogs.update('c', {'weight': 3.4, 'id': 'other'})

    assert row['weight'] == 3.4
    assert row['id'] == 'c'
    assert isinstance(row['updated_at'], datetime)


def test_update_missing_raises(dogs):
    with pytest.raises(RecordNotFoundError) as exc_info:
        dogs.update('ghost', {'name': 'x'})
    assert exc_info.value.table == DOGS
    assert exc_info.value.doc_id == 'ghost'


def test_upsert_creates_then_merges(dogs):
    dogs.upsert('q', {'name': 'first', 'color': 'black'})
    row = dogs.upsert('q', {'name': 'second'})

    assert row['name'] == 'second'
    assert row['color'] == 'black'


def test_delete_reports_existence(dogs):
    dogs.insert({'name': 'A'}, doc_id='a')
    assert dogs.delete('a') is True
    assert dogs.delete('a') is False


def test_list_filters_by_dog_and_date_range(fake_db):
    records = TableClient(HEALTH_RECORDS, db=fake_db)
    records.insert({'dog_id': 'd1', 'date': date(2024, 1, 10)}, doc_id='r1')
    records.insert({'dog_id': 'd1', 'date': date(2024, 3, 5)}, doc_id='r2')
    records.insert({'dog_id': 'd1', 'date': date(2024, 6, 1)}, doc_id='r3')
    records.insert({'dog_id': 'd2', 'date': date(2024, 3, 1)}, doc_id='r4')

    rows = records.list(dog_id='d1', date_field='date',
                        start_date=date(2024, 2, 1), end_date=date(2024, 6, 1), descending=True)

    assert [row['id'] for row in rows] == ['r3', 'r2']


def test_list_orders_and_limits(dogs):
    for name in ['c', 'a', 'b']:
        dogs.insert({'name': name}, doc_id=name)

    assert [row['name'] for row in dogs.list(order_by='name')] == ['a', 'b', 'c']
    assert [row['name'] for row in dogs.list(order_by='name', descending=True, limit=2)] == ['c', 'b']


def test_list_applies_extra_filters(dogs):
    dogs.insert({'name': 'a', 'status': 'owned'}, doc_id='a')
    dogs.insert({'name': 'b', 'status': 'sold'}, doc_id='b')

    rows = dogs.list(filters=[('status', '==', 'sold')])

    assert [row['id'] for row in rows] == ['b']


def test_batch_insert_splits_into_batches(fake_db, dogs):
    rows = [{'name': f'dog-{i}'} for i in range(5)]

    inserted = dogs.batch_insert(rows, batch_size=2)

    assert len(inserted) == 5
    assert len({row['id'] for row in inserted}) == 5
    assert fake_db.batch_commits == 3
    assert len(dogs.list()) == 5


def test_batch_insert_rejects_invalid_batch_size(dogs):
    with pytest.raises(ValueError):
        dogs.batch_insert([{'name': 'a'}], batch_size=0)
    with pytest.raises(ValueError):
        dogs.batch_insert([{'name': 'a'}], batch_size=501)


def test_build_tables_covers_every_table(fake_db):
    tables = build_tables(fake_db)
    assert set(tables) == set(ALL_TABLES)
    assert all(client.db is fake_db for client in tables.values())


@pytest.mark.parametrize("error, expected", [
    (RecordNotFoundError(DOGS, 'x'), "관련 데이터를 찾을 수 없습니다."),
    (google_exceptions.NotFound("missing"), "관련 데이터를 찾을 수 없습니다."),
    (google_exceptions.PermissionDenied("denied"), "권한이 없습니다. 로그인 상태를 확인해주세요."),
    (google_exceptions.Unauthenticated("expired"), "로그인이 만료되었습니다. 다시 로그인해주세요."),
    (Exception("JWT expired"), "로그인이 만료되었습니다. 다시 로그인해주세요."),
    (google_exceptions.DeadlineExceeded("slow"), "요청 시간이 초과되었습니다. 네트워크 연결을 확인해주세요."),
    (Exception("socket timeout"), "요청 시간이 초과되었습니다. 네트워크 연결을 확인해주세요."),
    (Exception("boom"), "boom"),
])
def test_describe_remote_error(error, expected):
    assert describe_remote_error(error) == expected
