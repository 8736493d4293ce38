# kennel_app/models/dog.py
from dataclasses import dataclass, field, asdict, fields
from datetime import date, datetime
from typing import Optional, List, Dict, Any
from enum import Enum
import logging

from kennel_app.utils.datetime_utils import DateTimeUtils

class DogGender(Enum):
    MALE = "male"
    FEMALE = "female"

class DogStatus(Enum):
    OWNED = "owned"
    SOLD = "sold"
    DECEASED = "deceased"
    RETURNED = "returned"

@dataclass
class Dog:
    """
    Firestore 'dogs' 컬렉션 문서 구조.
    견사의 모든 기록(거래, 건강, 성장, 번식)이 참조하는 집계 루트.
    sire_id / dam_id 는 같은 컬렉션의 다른 문서를 가리키는 자기 참조입니다.
    """
    id: str
    name: str
    breed: str
    gender: DogGender
    birth_date: date
    color: str
    created_at: datetime
    weight: Optional[float] = None
    microchip_id: Optional[str] = None
    registration_number: Optional[str] = None
    owner_contact: Optional[str] = None
    status: DogStatus = DogStatus.OWNED
    photo_urls: List[str] = field(default_factory=list)
    sire_id: Optional[str] = None
    dam_id: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def field_names(cls) -> set:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dog":
        """
        Firestore 문서나 요청 본문 딕셔너리로부터 Dog 인스턴스를 생성합니다.
        문자열 Enum 값과 Timestamp/문자열 날짜를 변환하고, 모르는 키는 버립니다.
        """
        processed_data = {k: v for k, v in data.items() if k in cls.field_names()}

        gender = processed_data.get('gender')
        if isinstance(gender, str):
            processed_data['gender'] = DogGender(gender)

        status = processed_data.get('status')
        if status is None:
            processed_data['status'] = DogStatus.OWNED
        elif isinstance(status, str):
            try:
                processed_data['status'] = DogStatus(status)
            except ValueError:
                logging.warning(f"Invalid DogStatus value '{status}' for dog {processed_data.get('id')}. Defaulting to owned.")
                processed_data['status'] = DogStatus.OWNED

        processed_data['birth_date'] = DateTimeUtils.to_date(processed_data.get('birth_date'))
        processed_data['created_at'] = DateTimeUtils.to_datetime(processed_data.get('created_at')) or DateTimeUtils.now()
        processed_data['updated_at'] = DateTimeUtils.to_datetime(processed_data.get('updated_at'))

        if processed_data.get('photo_urls') is None:
            processed_data['photo_urls'] = []

        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        """Enum 멤버를 문자열 값으로 바꾼 딕셔너리를 반환합니다."""
        dog_dict = asdict(self)
        dog_dict['gender'] = self.gender.value
        dog_dict['status'] = self.status.value
        return dog_dict
