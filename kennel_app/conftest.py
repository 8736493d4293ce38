# kennel_app/conftest.py
"""
테스트 공용 fixture

원격 저장소는 메모리 안의 Firestore 대역(FakeFirestore)으로,
분석 API 는 StubAnalysisService 로 대체합니다.
"""

import copy
import itertools
from datetime import date

import pytest
from firebase_admin import firestore
from flask_jwt_extended import create_access_token
from google.api_core import exceptions as google_exceptions

from kennel_app import create_app
from kennel_app.services.firestore_service import DOGS


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = copy.deepcopy(data)
        self.exists = data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self.collection.docs.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self.collection.docs:
            self.collection.docs[self.id].update(copy.deepcopy(data))
        else:
            self.collection.docs[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self.collection.docs:
            raise google_exceptions.NotFound(f"No document to update: {self.id}")
        self.collection.docs[self.id].update(copy.deepcopy(data))

    def delete(self):
        self.collection.docs.pop(self.id, None)


def _matches(doc, field_name, op, value):
    if field_name not in doc:
        return False
    current = doc[field_name]
    if op == '==':
        return current == value
    if op == 'in':
        return current in value
    if op == 'array_contains':
        return value in (current or [])
    if current is None:
        return False
    if op == '>=':
        return current >= value
    if op == '<=':
        return current <= value
    if op == '>':
        return current > value
    if op == '<':
        return current < value
    raise ValueError(f"unsupported operator: {op}")


class FakeQuery:
    def __init__(self, collection, conditions=(), ordering=None, max_results=None):
        self.collection = collection
        self.conditions = list(conditions)
        self.ordering = ordering
        self.max_results = max_results

    def where(self, field_name, op, value):
        return FakeQuery(self.collection, self.conditions + [(field_name, op, value)],
                         self.ordering, self.max_results)

    def order_by(self, field_name, direction=firestore.Query.ASCENDING):
        return FakeQuery(self.collection, self.conditions, (field_name, direction), self.max_results)

    def limit(self, count):
        return FakeQuery(self.collection, self.conditions, self.ordering, count)

    def stream(self):
        self.collection.db.query_count += 1
        if self.collection.db.fail_queries:
            raise google_exceptions.DeadlineExceeded("query timeout")
        rows = [(doc_id, doc) for doc_id, doc in self.collection.docs.items()
                if all(_matches(doc, *condition) for condition in self.conditions)]
        if self.ordering:
            field_name, direction = self.ordering
            rows = [row for row in rows if row[1].get(field_name) is not None]
            rows.sort(key=lambda row: row[1][field_name], reverse=direction == firestore.Query.DESCENDING)
        if self.max_results:
            rows = rows[:self.max_results]
        return [FakeSnapshot(doc_id, doc) for doc_id, doc in rows]


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        self.db = db
        self.name = name
        self.docs = {}
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocumentRef(self, doc_id or f"auto-{next(self.db.id_sequence)}")


class FakeBatch:
    def __init__(self, db):
        self.db = db
        self.writes = []

    def set(self, doc_ref, data, merge=False):
        self.writes.append((doc_ref, data, merge))

    def commit(self):
        self.db.batch_commits += 1
        for doc_ref, data, merge in self.writes:
            doc_ref.set(data, merge=merge)
        self.writes = []


class FakeFirestore:
    """TableClient 가 사용하는 만큼만 흉내 내는 메모리 Firestore 대역."""

    def __init__(self):
        self.collections = {}
        self.id_sequence = itertools.count(1)
        self.batch_commits = 0
        self.query_count = 0
        self.fail_queries = False

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]

    def batch(self):
        return FakeBatch(self)


class StubAnalysisService:
    """analyze_business_data 호출을 기록하고 정해진 답을 돌려주는 대역."""

    def __init__(self, reply="분석 결과", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def analyze_business_data(self, data):
        self.calls.append(data)
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def analysis_stub():
    return StubAnalysisService()


@pytest.fixture
def app(fake_db, analysis_stub):
    app = create_app('testing', db=fake_db, analysis_service=analysis_stub)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    with app.app_context():
        token = create_access_token(identity='admin-1')
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def tables(app):
    return app.services['tables']


@pytest.fixture
def state(app):
    return app.services['state']


@pytest.fixture
def seed_dog(tables):
    """원격 저장소에 견 문서를 바로 넣는 헬퍼. 상태 저장소는 건드리지 않습니다."""
    def _seed(dog_id, **overrides):
        data = dict(
            name=f"dog-{dog_id}",
            breed="Poodle",
            gender="female",
            birth_date=date(2022, 3, 1),
            color="white",
            status="owned",
            photo_urls=[],
        )
        data.update(overrides)
        return tables[DOGS].insert(data, doc_id=dog_id)
    return _seed
