# kennel_app/models/user.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any

from kennel_app.utils.datetime_utils import DateTimeUtils

@dataclass
class User:
    """
    현재 로그인한 관리자 정보. 인증 자체는 외부에서 처리되고,
    이 객체는 상태 저장소의 currentUser 로만 보관됩니다.
    """
    id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data['id'],
            email=data['email'],
            full_name=data.get('full_name'),
            avatar_url=data.get('avatar_url'),
            created_at=DateTimeUtils.to_datetime(data.get('created_at')) or DateTimeUtils.now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
