# kennel_app/models/litter.py
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Optional, List, Dict, Any

from kennel_app.utils.datetime_utils import DateTimeUtils

@dataclass
class Litter:
    """
    Firestore 'litters' 컬렉션 문서 구조.
    부견(sire)과 모견(dam) 한 쌍의 교배 및 출산 기록. puppy_ids 는 'dogs' 문서 ID 목록.
    birth_date 가 비어 있으면 아직 임신 중인 기록입니다.
    """
    id: str
    sire_id: str
    dam_id: str
    birth_date: Optional[date] = None
    puppy_ids: List[str] = field(default_factory=list)
    mating_date: Optional[date] = None
    expected_birth_date: Optional[date] = None
    puppy_count: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Litter":
        return cls(
            id=data['id'], sire_id=data['sire_id'], dam_id=data['dam_id'],
            birth_date=DateTimeUtils.to_date(data.get('birth_date')),
            puppy_ids=list(data.get('puppy_ids') or []),
            mating_date=DateTimeUtils.to_date(data.get('mating_date')),
            expected_birth_date=DateTimeUtils.to_date(data.get('expected_birth_date')),
            puppy_count=data.get('puppy_count'),
            notes=data.get('notes'),
            created_at=DateTimeUtils.to_datetime(data.get('created_at')) or DateTimeUtils.now(),
        )

    @property
    def is_born(self) -> bool:
        return self.birth_date is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
