# kennel_app/models/growth_event.py
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Optional, Dict, Any

from kennel_app.utils.datetime_utils import DateTimeUtils

@dataclass
class GrowthEvent:
    """Firestore 'growth_events' 컬렉션 문서 구조 (성장 사진/메모)."""
    id: str
    dog_id: str
    event_date: date
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GrowthEvent":
        return cls(
            id=data['id'], dog_id=data['dog_id'],
            event_date=DateTimeUtils.to_date(data['event_date']),
            photo_url=data.get('photo_url'), notes=data.get('notes'),
            created_at=DateTimeUtils.to_datetime(data.get('created_at')) or DateTimeUtils.now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
