# kennel_app/models/qrcode.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, Any

from kennel_app.utils.datetime_utils import DateTimeUtils

@dataclass
class QrCode:
    """
    Firestore 'qrcodes' 컬렉션 문서 구조.
    문서 ID가 곧 dog_id 이며, 견 한 마리당 하나만 존재합니다 (upsert).
    """
    dog_id: str
    qrcode_url: str
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QrCode":
        return cls(
            dog_id=data['dog_id'],
            qrcode_url=data['qrcode_url'],
            updated_at=DateTimeUtils.to_datetime(data.get('updated_at')) or DateTimeUtils.now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
