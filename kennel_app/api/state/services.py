# kennel_app/api/state/services.py
import logging
from typing import Any, Dict, Optional

from kennel_app.models.user import User
from kennel_app.schemas.dog_schema import DogSchema
from kennel_app.schemas.user_schema import UserSchema
from kennel_app.store.state_store import AppStateStore


class StateService:
    """상태 저장소를 HTTP 로 노출하기 위한 얇은 서비스. 원격 조회는 DogService 에 맡깁니다."""

    def __init__(self, state: AppStateStore, dog_service):
        self.state = state
        self.dog_service = dog_service
        logging.info("StateService initialized with dependencies.")

    def get_snapshot(self) -> Dict[str, Any]:
        snapshot = self.state.snapshot()
        return {
            'current_user': UserSchema().dump(snapshot.current_user.to_dict()) if snapshot.current_user else None,
            'dogs': DogSchema(many=True).dump([dog.to_dict() for dog in snapshot.dogs]),
            'selected_dog': DogSchema().dump(snapshot.selected_dog.to_dict()) if snapshot.selected_dog else None,
            'is_loading': snapshot.is_loading,
            'last_error': snapshot.last_error,
        }

    def set_user(self, user_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """user_data 가 None 이면 로그아웃으로 보고 현재 사용자를 비웁니다."""
        self.state.set_user(User.from_dict(user_data) if user_data else None)
        return self.get_snapshot()

    def select_dog(self, dog_id: Optional[str]) -> Dict[str, Any]:
        """
        선택된 견을 바꿉니다. roster 에 있으면 roster 값을, 없으면 원격 저장소 값을 사용합니다.
        dog_id 가 None 이면 선택을 해제합니다.
        """
        self.state.set_selected_dog(self.dog_service.find_dog(dog_id) if dog_id else None)
        return self.get_snapshot()

    def clear_error(self) -> Dict[str, Any]:
        self.state.clear_error()
        return self.get_snapshot()
