# conftest.py
"""
테스트 공용 픽스처

- FakeFirestore: 저장소 서비스가 호출하는 Firestore 클라이언트 API만 메모리에서 흉내냅니다.
  (collection/document/하위 컬렉션, where/order_by/limit/stream, collection_group, batch,
   Increment/ArrayUnion/ArrayRemove/DELETE_FIELD)
- FakeBucket: Storage 버킷. 없는 객체 삭제 시 google.api_core NotFound 를 발생시킵니다.
- app/client: create_app(services=...) 로 Firebase 초기화 없이 구성한 Flask 앱
"""

import copy
import uuid
from types import SimpleNamespace

import pytest
from firebase_admin import firestore
from flask_jwt_extended import create_access_token
from google.api_core.exceptions import NotFound

from app import create_app, build_services
from app.services.openai_service import OpenAIService
from app.services.storage_service import StorageService


# =====================================================================================
# Firestore 대역
# =====================================================================================

class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


def _apply_transforms(current, changes):
    """update/set 값에 포함된 Firestore 변환(sentinel)을 적용한 새 문서를 반환합니다."""
    result = copy.deepcopy(current)
    for key, value in changes.items():
        if value is firestore.DELETE_FIELD:
            result.pop(key, None)
        elif isinstance(value, firestore.Increment):
            result[key] = (result.get(key) or 0) + value.value
        elif isinstance(value, firestore.ArrayUnion):
            items = list(result.get(key) or [])
            items.extend(v for v in value.values if v not in items)
            result[key] = items
        elif isinstance(value, firestore.ArrayRemove):
            result[key] = [v for v in (result.get(key) or []) if v not in value.values]
        else:
            result[key] = copy.deepcopy(value)
    return result


class FakeDocumentReference:
    def __init__(self, db, path):
        self._db = db
        self.path = path  # ('posts', 'slug', 'comments', 'id')
        self.id = path[-1]

    def get(self):
        self._db.check_failure('get', self.path)
        return FakeSnapshot(self, self._db.documents.get(self.path))

    def set(self, data, merge=False):
        self._db.check_failure('set', self.path)
        base = self._db.documents.get(self.path, {}) if merge else {}
        self._db.documents[self.path] = _apply_transforms(base, data)

    def update(self, data):
        self._db.check_failure('update', self.path)
        if self.path not in self._db.documents:
            raise NotFound(f"No document to update: {'/'.join(self.path)}")
        self._db.documents[self.path] = _apply_transforms(self._db.documents[self.path], data)

    def delete(self):
        self._db.check_failure('delete', self.path)
        self._db.documents.pop(self.path, None)

    def collection(self, name):
        return FakeCollectionReference(self._db, self.path + (name,))


_OPERATORS = {
    '==': lambda field, value: field == value,
    '>=': lambda field, value: field >= value,
    '>': lambda field, value: field > value,
    '<=': lambda field, value: field <= value,
    '<': lambda field, value: field < value,
    'array_contains': lambda field, value: isinstance(field, list) and value in field,
}


class FakeQuery:
    def __init__(self, db, matcher, filters=(), orders=(), limit_count=None):
        self._db = db
        self._matcher = matcher
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._limit = limit_count

    def _copy(self, **changes):
        state = dict(filters=self._filters, orders=self._orders, limit_count=self._limit)
        state.update(changes)
        return FakeQuery(self._db, self._matcher, **state)

    def where(self, field, op, value):
        return self._copy(filters=self._filters + ((field, op, value),))

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return self._copy(orders=self._orders + ((field, direction),))

    def limit(self, count):
        return self._copy(limit_count=count)

    def stream(self):
        self._db.check_failure('stream', None)
        rows = []
        for path, data in self._db.documents.items():
            if not self._matcher(path):
                continue
            # 필드가 없는 문서는 필터/정렬 대상에서 제외 (Firestore 와 동일)
            if any(f not in data or not _OPERATORS[op](data[f], v) for f, op, v in self._filters):
                continue
            if any(f not in data for f, _ in self._orders):
                continue
            rows.append((path, data))

        for field, direction in reversed(self._orders):
            rows.sort(key=lambda row: row[1][field],
                      reverse=direction == firestore.Query.DESCENDING)
        if self._limit is not None:
            rows = rows[:self._limit]
        for path, data in rows:
            yield FakeSnapshot(FakeDocumentReference(self._db, path), copy.deepcopy(data))


class FakeCollectionReference(FakeQuery):
    def __init__(self, db, path):
        super().__init__(db, lambda doc_path: len(doc_path) == len(path) + 1 and doc_path[:-1] == path)
        self.path = path

    def document(self, document_id=None):
        return FakeDocumentReference(self._db, self.path + (document_id or uuid.uuid4().hex[:20],))


class FakeWriteBatch:
    def __init__(self, db):
        self._db = db
        self._writes = []

    def set(self, reference, data, merge=False):
        self._writes.append(lambda: reference.set(data, merge=merge))

    def update(self, reference, data):
        self._writes.append(lambda: reference.update(data))

    def delete(self, reference):
        self._writes.append(reference.delete)

    def commit(self):
        self._db.check_failure('commit', None)
        # 커밋 전체가 성공하거나 아무것도 반영되지 않습니다.
        snapshot = copy.deepcopy(self._db.documents)
        try:
            for write in self._writes:
                write()
        except Exception:
            self._db.documents = snapshot
            raise
        self._db.commits += 1
        self._writes = []


class FakeFirestore:
    def __init__(self):
        self.documents = {}
        self.failures = {}
        self.commits = 0

    def fail_on(self, operation, error=None, path=None):
        """지정한 연산(get/set/update/delete/stream/commit)이 오류를 내도록 설정합니다."""
        self.failures[operation] = (path, error or RuntimeError(f"firestore {operation} unavailable"))

    def check_failure(self, operation, path):
        if operation in self.failures:
            target, error = self.failures[operation]
            if target is None or target == path:
                raise error

    def collection(self, name):
        return FakeCollectionReference(self, (name,))

    def collection_group(self, name):
        return FakeQuery(self, lambda doc_path: len(doc_path) >= 2 and doc_path[-2] == name)

    def batch(self):
        return FakeWriteBatch(self)

    # --- 테스트 편의 메서드 ---
    def seed(self, collection_path, document_id, data):
        self.documents[tuple(collection_path.split('/')) + (document_id,)] = copy.deepcopy(data)

    def doc(self, path):
        data = self.documents.get(tuple(path.split('/')))
        return copy.deepcopy(data) if data is not None else None


# =====================================================================================
# Storage / OpenAI 대역
# =====================================================================================

class FakeBlob:
    def __init__(self, bucket, name):
        self._bucket = bucket
        self.name = name

    def delete(self):
        if self.name in self._bucket.errors:
            raise self._bucket.errors[self.name]
        if self.name not in self._bucket.objects:
            raise NotFound(f"No such object: {self.name}")
        self._bucket.objects.remove(self.name)


class FakeBucket:
    def __init__(self, objects=()):
        self.objects = set(objects)
        self.errors = {}

    def blob(self, name):
        return FakeBlob(self, name)


class FakeChatCompletions:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAIClient:
    def __init__(self, reply="", error=None):
        self.chat = SimpleNamespace(completions=FakeChatCompletions(reply, error))


# =====================================================================================
# 픽스처
# =====================================================================================

@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def fake_bucket():
    return FakeBucket()


@pytest.fixture
def openai_client():
    return FakeOpenAIClient(reply="Python, Flask , python, Testing")


@pytest.fixture
def services(fake_db, fake_bucket, openai_client):
    return build_services(
        fake_db,
        StorageService(bucket=fake_bucket),
        OpenAIService(client=openai_client),
    )


@pytest.fixture
def app(services):
    app = create_app('testing', services=services)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """사용자 ID로 Authorization 헤더를 만드는 함수를 반환합니다."""
    def _headers(user_id):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {'Authorization': f'Bearer {token}'}
    return _headers
