# kennel_app/api/health/services.py
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from kennel_app.api.common.base import BaseRecordService
from kennel_app.models.dog import Dog
from kennel_app.models.health_record import HealthRecord, HealthRecordType
from kennel_app.services.firestore_service import DOGS, HEALTH_RECORDS
from kennel_app.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

# 통계 기준 기간 (일)
VACCINATION_WINDOW_DAYS = 365
CHECKUP_WINDOW_DAYS = 90
ATTENTION_WINDOW_DAYS = 180


class HealthService(BaseRecordService):
    """예방접종/검진/치료 기록 서비스"""

    def list_records(self, dog_id: Optional[str] = None, start_date=None, end_date=None,
                     type: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = [('type', '==', type)] if type else []
        records = self._list_models(HEALTH_RECORDS, HealthRecord.from_dict, 'date',
                                    dog_id=dog_id, start_date=start_date, end_date=end_date,
                                    filters=filters)
        with self._remote_call("join dogs for health records"):
            return self._attach_dog_summaries([record.to_dict() for record in records])

    def create_record(self, data: Dict[str, Any]) -> Dict[str, Any]:
        with self._remote_call("create health record"):
            self._ensure_dog_exists(data['dog_id'])
            record = HealthRecord.from_dict(self.tables[HEALTH_RECORDS].insert(data))
            joined = self._attach_dog_summaries([record.to_dict()])[0]
        logger.info(f"Health record {record.id} ({record.type.value}) created for dog {record.dog_id}")
        return joined

    def delete_record(self, record_id: str) -> None:
        self._delete_record(HEALTH_RECORDS, record_id)

    def get_stats(self, dog_id: Optional[str] = None) -> Dict[str, Any]:
        """
        건강 관리 현황 통계.
        - recent_vaccinations: 최근 1년 내 예방접종 수
        - recent_checkups: 최근 90일 내 검진 수
        - treatment_count: 전체 치료 기록 수
        - dogs_needing_attention: 최근 180일 동안 어떤 기록도 없는 견 이름 목록
        """
        today = DateTimeUtils.today()
        with self._remote_call("health stats"):
            records = [HealthRecord.from_dict(row)
                       for row in self.tables[HEALTH_RECORDS].list(dog_id=dog_id)]
            if dog_id:
                row = self.tables[DOGS].get(dog_id)
                dogs = [Dog.from_dict(row)] if row else []
            else:
                dogs = [Dog.from_dict(row) for row in self.tables[DOGS].list(order_by='name')]

        def count_since(record_type: HealthRecordType, days: Optional[int] = None) -> int:
            since = today - timedelta(days=days) if days else None
            return sum(1 for r in records if r.type == record_type and (since is None or r.date >= since))

        attention_since = today - timedelta(days=ATTENTION_WINDOW_DAYS)
        checked = {r.dog_id for r in records if r.date >= attention_since}

        return {
            'total_records': len(records),
            'recent_vaccinations': count_since(HealthRecordType.VACCINATION, VACCINATION_WINDOW_DAYS),
            'recent_checkups': count_since(HealthRecordType.CHECKUP, CHECKUP_WINDOW_DAYS),
            'treatment_count': count_since(HealthRecordType.TREATMENT),
            'dogs_needing_attention': [dog.name for dog in dogs if dog.id not in checked],
        }
