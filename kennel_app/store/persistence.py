# kennel_app/store/persistence.py
"""
상태 저장소의 영속 부분(currentUser, selectedDog)을 보관하는 저장 장치.

레코드 형식 (JSON 파일 하나에 이름 붙은 레코드 하나):
    {"pet-breeding-storage": {"version": 1, "state": {"user": {...} | null, "selectedDog": {...} | null}}}
"""
import json
import logging
import os
import tempfile
from typing import Optional, Tuple

from marshmallow import ValidationError

from kennel_app.models.dog import Dog
from kennel_app.models.user import User
from kennel_app.schemas.dog_schema import DogSchema
from kennel_app.schemas.user_schema import UserSchema

STORAGE_NAME = 'pet-breeding-storage'
STORAGE_VERSION = 1

DurableState = Tuple[Optional[User], Optional[Dog]]


def serialize_durable_state(user: Optional[User], selected_dog: Optional[Dog]) -> dict:
    """영속 부분을 JSON 호환 딕셔너리로 변환합니다."""
    return {
        'version': STORAGE_VERSION,
        'state': {
            'user': UserSchema().dump(user.to_dict()) if user else None,
            'selectedDog': DogSchema().dump(selected_dog.to_dict()) if selected_dog else None,
        }
    }


def deserialize_durable_state(record: Optional[dict]) -> DurableState:
    """
    저장된 레코드를 (user, selected_dog) 로 되돌립니다.
    레코드가 없으면 둘 다 None 입니다. 형식이 맞지 않으면 ValueError.
    """
    if not record:
        return None, None

    version = record.get('version')
    if version != STORAGE_VERSION:
        raise ValueError(f"지원하지 않는 상태 레코드 버전입니다: {version}")

    state = record.get('state') or {}
    try:
        user_data = state.get('user')
        dog_data = state.get('selectedDog')
        user = User.from_dict(UserSchema().load(user_data)) if user_data else None
        selected_dog = Dog.from_dict(DogSchema().load(dog_data)) if dog_data else None
    except ValidationError as err:
        raise ValueError(f"상태 레코드 형식이 올바르지 않습니다: {err.messages}")
    return user, selected_dog


class StatePersistence:
    """영속 장치 인터페이스. load() 는 (user, selected_dog), save() 는 같은 쌍을 기록합니다."""

    def load(self) -> DurableState:
        raise NotImplementedError

    def save(self, user: Optional[User], selected_dog: Optional[Dog]) -> None:
        raise NotImplementedError


class MemoryStatePersistence(StatePersistence):
    """프로세스 메모리에 직렬화된 레코드를 보관합니다. 테스트와 임시 실행용."""

    def __init__(self):
        self.record: Optional[dict] = None

    def load(self) -> DurableState:
        return deserialize_durable_state(self.record)

    def save(self, user: Optional[User], selected_dog: Optional[Dog]) -> None:
        self.record = serialize_durable_state(user, selected_dog)


class JsonFileStatePersistence(StatePersistence):
    """
    JSON 파일에 레코드를 기록합니다. 같은 파일에 다른 이름의 레코드가 있으면 보존합니다.
    쓰기는 임시 파일에 기록한 뒤 교체하므로 중간 상태의 파일이 남지 않습니다.
    """

    def __init__(self, path: str, name: str = STORAGE_NAME):
        self.path = path
        self.name = name

    def _read_file(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            content = json.load(f)
        if not isinstance(content, dict):
            raise ValueError(f"상태 파일 형식이 올바르지 않습니다: {self.path}")
        return content

    def load(self) -> DurableState:
        try:
            content = self._read_file()
        except json.JSONDecodeError as e:
            raise ValueError(f"상태 파일을 해석할 수 없습니다: {self.path} ({e})")
        return deserialize_durable_state(content.get(self.name))

    def save(self, user: Optional[User], selected_dog: Optional[Dog]) -> None:
        try:
            content = self._read_file()
        except ValueError:
            logging.warning(f"Overwriting unreadable state file: {self.path}")
            content = {}
        content[self.name] = serialize_durable_state(user, selected_dog)

        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.state-', suffix='.json')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(content, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
