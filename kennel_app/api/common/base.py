# kennel_app/api/common/base.py
"""
도메인 기록 서비스 기본 클래스
재무/건강/성장/번식 서비스가 상속받는 공통 기능 제공
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, List, Optional

from kennel_app.services.firestore_service import (
    DOGS, RecordNotFoundError, TableClient, describe_remote_error
)
from kennel_app.store.state_store import AppStateStore

logger = logging.getLogger(__name__)


class BaseRecordService:
    """
    원격 테이블 기반 서비스의 기본 클래스.
    원격 호출 실패는 상태 저장소의 last_error 에 기록한 뒤 호출자에게 다시 던집니다.
    """

    def __init__(self, state: AppStateStore, tables: Dict[str, TableClient]):
        self.state = state
        self.tables = tables
        self.dogs_table = tables[DOGS]

    @contextmanager
    def _remote_call(self, action: str):
        """원격 호출 구간. 입력 검증 오류(ValueError)는 last_error 에 남기지 않습니다."""
        try:
            yield
        except ValueError:
            raise
        except Exception as e:
            logger.error(f"{action} failed: {e}", exc_info=not isinstance(e, RecordNotFoundError))
            self.state.set_error(describe_remote_error(e))
            raise

    def _ensure_dog_exists(self, dog_id: str) -> Dict[str, Any]:
        """견 문서를 조회합니다. 없으면 RecordNotFoundError."""
        row = self.dogs_table.get(dog_id)
        if row is None:
            raise RecordNotFoundError(DOGS, dog_id)
        return row

    def _attach_dog_summaries(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        기록마다 참조하는 견의 이름/견종/성별 요약을 'dog' 키로 붙여 반환합니다.
        저장은 정규화된 dog_id 만 하고, 이 값은 조회 시점에 계산됩니다.
        """
        dogs = self.dogs_table.get_many(row.get('dog_id') for row in rows)
        joined = []
        for row in rows:
            dog = dogs.get(row.get('dog_id'))
            summary = None
            if dog:
                summary = {'name': dog.get('name'), 'breed': dog.get('breed'), 'gender': dog.get('gender')}
            joined.append({**row, 'dog': summary})
        return joined

    def _list_models(self, table: str, factory: Callable[[Dict[str, Any]], Any], date_field: str,
                     dog_id: Optional[str] = None, start_date=None, end_date=None,
                     filters: Optional[Iterable] = None) -> List[Any]:
        """최신 날짜순으로 기록을 조회하여 모델 객체 목록으로 반환합니다."""
        with self._remote_call(f"list {table}"):
            rows = self.tables[table].list(
                dog_id=dog_id, date_field=date_field,
                start_date=start_date, end_date=end_date,
                descending=True, filters=list(filters or []),
            )
        return [factory(row) for row in rows]

    def _delete_record(self, table: str, record_id: str) -> None:
        with self._remote_call(f"delete {table}/{record_id}"):
            if not self.tables[table].delete(record_id):
                raise RecordNotFoundError(table, record_id)
        logger.info(f"{table} record {record_id} deleted")
