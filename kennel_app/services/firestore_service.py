# kennel_app/services/firestore_service.py
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from kennel_app.utils.datetime_utils import DateTimeUtils

# 원격 저장소의 테이블(컬렉션) 이름
DOGS = 'dogs'
PURCHASES = 'purchases'
SALES = 'sales'
EXPENSES = 'expenses'
LITTERS = 'litters'
HEALTH_RECORDS = 'health_records'
GROWTH_EVENTS = 'growth_events'
QRCODES = 'qrcodes'

ALL_TABLES = (DOGS, PURCHASES, SALES, EXPENSES, LITTERS, HEALTH_RECORDS, GROWTH_EVENTS, QRCODES)

# Firestore batch 한 번에 허용되는 최대 쓰기 수
MAX_BATCH_WRITES = 500


class RecordNotFoundError(LookupError):
    """원격 저장소에 해당 ID의 문서가 없을 때 발생합니다."""

    def __init__(self, table: str, doc_id: str):
        self.table = table
        self.doc_id = doc_id
        super().__init__(f"'{table}' 에서 ID '{doc_id}' 문서를 찾을 수 없습니다.")


def describe_remote_error(error: Exception) -> str:
    """
    원격 저장소 예외를 사용자에게 보여줄 메시지로 변환합니다.
    상태 저장소의 last_error 에 그대로 들어가는 문구입니다.
    """
    if isinstance(error, (RecordNotFoundError, google_exceptions.NotFound)):
        return "관련 데이터를 찾을 수 없습니다."
    if isinstance(error, google_exceptions.PermissionDenied):
        return "권한이 없습니다. 로그인 상태를 확인해주세요."
    if isinstance(error, google_exceptions.Unauthenticated) or 'JWT' in str(error):
        return "로그인이 만료되었습니다. 다시 로그인해주세요."
    if isinstance(error, (google_exceptions.DeadlineExceeded, TimeoutError)) or 'timeout' in str(error).lower():
        return "요청 시간이 초과되었습니다. 네트워크 연결을 확인해주세요."
    return str(error) or "작업에 실패했습니다. 다시 시도해주세요."


class TableClient:
    """
    원격 저장소의 테이블 하나에 대한 얇은 CRUD 클라이언트.
    문서 ID는 'id' 필드에도 함께 저장되어, 조회 결과는 항상 'id' 를 포함합니다.
    """

    def __init__(self, table: str, db=None):
        self.table = table
        self.db = db or firestore.client()
        self.collection = self.db.collection(table)

    def _from_snapshot(self, doc) -> Dict[str, Any]:
        data = DateTimeUtils.from_firestore(doc.to_dict() or {})
        data.setdefault('id', doc.id)
        return data

    def insert(self, data: Dict[str, Any], doc_id: Optional[str] = None) -> Dict[str, Any]:
        """새 문서를 만듭니다. ID가 없으면 uuid4 를 부여하고 created_at 을 기록합니다."""
        doc_id = doc_id or data.get('id') or str(uuid.uuid4())
        record = dict(data)
        record['id'] = doc_id
        record.setdefault('created_at', DateTimeUtils.now())
        try:
            self.collection.document(doc_id).set(DateTimeUtils.for_firestore(record))
        except Exception as e:
            logging.error(f"Firestore insert failed (table: {self.table}, id: {doc_id}): {e}", exc_info=True)
            raise
        logging.info(f"Firestore insert (table: {self.table}, id: {doc_id})")
        return DateTimeUtils.from_firestore(DateTimeUtils.for_firestore(record))

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self.collection.document(doc_id).get()
        if not doc.exists:
            return None
        return self._from_snapshot(doc)

    def get_many(self, doc_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """여러 ID를 한 번에 조회하여 id -> 문서 딕셔너리로 반환합니다. 없는 ID는 빠집니다."""
        found = {}
        for doc_id in dict.fromkeys(doc_ids):
            if not doc_id:
                continue
            record = self.get(doc_id)
            if record is not None:
                found[doc_id] = record
        return found

    def update(self, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """부분 업데이트 후 갱신된 문서를 반환합니다. 문서가 없으면 RecordNotFoundError."""
        doc_ref = self.collection.document(doc_id)
        if not doc_ref.get().exists:
            raise RecordNotFoundError(self.table, doc_id)
        changes = {k: v for k, v in data.items() if k != 'id'}
        changes['updated_at'] = DateTimeUtils.now()
        doc_ref.update(DateTimeUtils.for_firestore(changes))
        logging.info(f"Firestore update (table: {self.table}, id: {doc_id}) fields: {list(changes.keys())}")
        return self._from_snapshot(doc_ref.get())

    def upsert(self, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """문서가 있으면 병합하고 없으면 새로 만듭니다."""
        doc_ref = self.collection.document(doc_id)
        doc_ref.set(DateTimeUtils.for_firestore(dict(data)), merge=True)
        logging.info(f"Firestore upsert (table: {self.table}, id: {doc_id})")
        return self._from_snapshot(doc_ref.get())

    def delete(self, doc_id: str) -> bool:
        """문서를 삭제합니다. 삭제 전 존재 여부를 반환합니다."""
        doc_ref = self.collection.document(doc_id)
        existed = doc_ref.get().exists
        if existed:
            doc_ref.delete()
            logging.info(f"Firestore delete (table: {self.table}, id: {doc_id})")
        return existed

    def list(self,
             dog_id: Optional[str] = None,
             date_field: Optional[str] = None,
             start_date=None,
             end_date=None,
             order_by: Optional[str] = None,
             descending: bool = False,
             limit: Optional[int] = None,
             filters: Optional[List[Tuple[str, str, Any]]] = None) -> List[Dict[str, Any]]:
        """
        조건에 맞는 문서를 정렬된 목록으로 조회합니다.

        :param dog_id: 'dog_id' 필드가 같은 문서만
        :param date_field: start_date / end_date 가 적용될 날짜 필드명
        :param order_by: 정렬 필드 (없으면 date_field, 그것도 없으면 저장소 기본 순서)
        :param filters: 추가 (필드, 연산자, 값) 조건 목록
        """
        query = self.collection
        if dog_id:
            query = query.where('dog_id', '==', dog_id)
        for field_name, op, value in filters or []:
            query = query.where(field_name, op, DateTimeUtils.for_firestore(value))
        if date_field and start_date:
            query = query.where(date_field, '>=', DateTimeUtils.to_datetime(start_date))
        if date_field and end_date:
            query = query.where(date_field, '<=', DateTimeUtils.to_datetime(end_date))

        sort_field = order_by or date_field
        if sort_field:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(sort_field, direction=direction)
        if limit:
            query = query.limit(limit)

        try:
            return [self._from_snapshot(doc) for doc in query.stream()]
        except Exception as e:
            logging.error(f"Firestore query failed (table: {self.table}): {e}", exc_info=True)
            raise

    def batch_insert(self, rows: List[Dict[str, Any]], batch_size: int = 100) -> List[Dict[str, Any]]:
        """여러 문서를 batch_size 단위의 batch 쓰기로 나누어 저장합니다."""
        if batch_size < 1 or batch_size > MAX_BATCH_WRITES:
            raise ValueError(f"batch_size 는 1 이상 {MAX_BATCH_WRITES} 이하여야 합니다.")

        results = []
        for start in range(0, len(rows), batch_size):
            batch = self.db.batch()
            chunk = []
            for row in rows[start:start + batch_size]:
                record = dict(row)
                record['id'] = record.get('id') or str(uuid.uuid4())
                record.setdefault('created_at', DateTimeUtils.now())
                batch.set(self.collection.document(record['id']), DateTimeUtils.for_firestore(record))
                chunk.append(record)
            batch.commit()
            results.extend(DateTimeUtils.from_firestore(DateTimeUtils.for_firestore(r)) for r in chunk)
        logging.info(f"Firestore batch insert (table: {self.table}): {len(results)} rows")
        return results


def build_tables(db=None) -> Dict[str, TableClient]:
    """모든 테이블에 대한 TableClient 를 같은 DB 클라이언트로 만듭니다."""
    db = db or firestore.client()
    return {table: TableClient(table, db=db) for table in ALL_TABLES}
