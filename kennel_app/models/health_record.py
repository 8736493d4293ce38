# kennel_app/models/health_record.py
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum
from typing import Optional, Dict, Any

from kennel_app.utils.datetime_utils import DateTimeUtils

class HealthRecordType(Enum):
    VACCINATION = "vaccination"
    CHECKUP = "checkup"
    TREATMENT = "treatment"

@dataclass
class HealthRecord:
    """Firestore 'health_records' 컬렉션 문서 구조 (예방접종, 검진, 치료)."""
    id: str
    dog_id: str
    type: HealthRecordType
    date: date
    description: str
    document_url: Optional[str] = None
    cost: Optional[float] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HealthRecord":
        return cls(
            id=data['id'], dog_id=data['dog_id'],
            type=HealthRecordType(data['type']),
            date=DateTimeUtils.to_date(data['date']),
            description=data.get('description') or '',
            document_url=data.get('document_url'),
            cost=data.get('cost'),
            created_at=DateTimeUtils.to_datetime(data.get('created_at')) or DateTimeUtils.now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        record_dict = asdict(self)
        record_dict['type'] = self.type.value
        return record_dict
