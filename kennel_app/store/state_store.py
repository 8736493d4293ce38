# kennel_app/store/state_store.py
"""
애플리케이션 상태 저장소.

프로세스 안에서 현재 사용자, 견 목록(roster), 선택된 견, 로딩/에러 플래그를 보관합니다.
create_app() 에서 한 번 생성되어 app.services['state'] 로 각 서비스에 주입됩니다.

- 모든 변경은 동기적이며 네트워크 호출을 하지 않고, 예외를 던지지 않습니다.
- roster 는 id -> Dog 매핑(삽입 순서 유지)이므로 같은 id 가 두 번 들어가지 않습니다.
- 선택된 견이 roster 에 있는 id 를 가리키면 항상 roster 의 현재 값과 같습니다.
- currentUser, selectedDog 만 영속 장치에 기록됩니다.
"""
import dataclasses
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from kennel_app.models.dog import Dog, DogGender, DogStatus
from kennel_app.models.user import User
from kennel_app.store.persistence import StatePersistence
from kennel_app.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class DuplicatePolicy(Enum):
    UPSERT = "upsert"
    REJECT = "reject"


class AddOutcome(Enum):
    ADDED = "added"
    REPLACED = "replaced"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class StateSnapshot:
    """관찰자에게 전달되는 읽기 전용 상태 사본."""
    current_user: Optional[User]
    dogs: Tuple[Dog, ...]
    selected_dog: Optional[Dog]
    is_loading: bool
    last_error: Optional[str]


Listener = Callable[[StateSnapshot], None]


class AppStateStore:
    """단일 작성자 의미를 갖는 명시적 상태 객체."""

    def __init__(self,
                 persistence: Optional[StatePersistence] = None,
                 duplicate_policy: DuplicatePolicy = DuplicatePolicy.UPSERT,
                 strict_lookups: bool = False):
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self.persistence = persistence
        self.duplicate_policy = duplicate_policy
        self.strict_lookups = strict_lookups

        # 휘발성 상태는 저장된 값과 관계없이 항상 비어 있는 상태로 시작
        self._dogs: Dict[str, Dog] = {}
        self._is_loading = False
        self._last_error: Optional[str] = None
        self._current_user: Optional[User] = None
        self._selected_dog: Optional[Dog] = None

        if persistence is not None:
            try:
                self._current_user, self._selected_dog = persistence.load()
            except Exception as e:
                logger.warning(f"Failed to restore persisted state, starting empty: {e}")
        logger.info("AppStateStore initialized.")

    # ------------------------------------------------------------------
    # 읽기
    # ------------------------------------------------------------------
    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    @property
    def dogs(self) -> List[Dog]:
        with self._lock:
            return list(self._dogs.values())

    @property
    def selected_dog(self) -> Optional[Dog]:
        return self._selected_dog

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def get_dog(self, dog_id: str) -> Optional[Dog]:
        with self._lock:
            return self._dogs.get(dog_id)

    def snapshot(self) -> StateSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> StateSnapshot:
        return StateSnapshot(
            current_user=self._current_user,
            dogs=tuple(self._dogs.values()),
            selected_dog=self._selected_dog,
            is_loading=self._is_loading,
            last_error=self._last_error,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """변경이 적용될 때마다 새 스냅샷으로 listener 를 호출합니다. 해지 함수를 반환."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    # ------------------------------------------------------------------
    # 변경
    # ------------------------------------------------------------------
    def set_user(self, user: Optional[User]) -> None:
        with self._lock:
            self._current_user = user
            self._persist_locked()
            snapshot = self._snapshot_locked()
        self._notify(snapshot)

    def set_dogs(self, dogs: Iterable[Dog]) -> None:
        """roster 전체를 교체합니다. 같은 id 가 여러 번 오면 마지막 값이 남습니다."""
        with self._lock:
            self._dogs = {dog.id: dog for dog in dogs}
            persist = self._sync_selection_locked()
            if persist:
                self._persist_locked()
            snapshot = self._snapshot_locked()
        self._notify(snapshot)

    def add_dog(self, dog: Dog) -> AddOutcome:
        with self._lock:
            if dog.id in self._dogs:
                if self.duplicate_policy is DuplicatePolicy.REJECT:
                    logger.warning(f"add_dog rejected duplicate id {dog.id}")
                    return AddOutcome.CONFLICT
                self._dogs[dog.id] = dog
                outcome = AddOutcome.REPLACED
            else:
                self._dogs[dog.id] = dog
                outcome = AddOutcome.ADDED
            if self._sync_selection_locked():
                self._persist_locked()
            snapshot = self._snapshot_locked()
        self._notify(snapshot)
        return outcome

    def update_dog(self, dog_id: str, updates: Dict[str, Any]) -> bool:
        """
        roster 항목에 updates 의 필드만 덮어씁니다 (얕은 병합).
        id 는 바꿀 수 없으므로 무시하고, 모르는 필드명은 경고 후 무시합니다.
        선택된 견이 같은 id 이면 같은 병합을 적용합니다. 찾았는지 여부를 반환.
        """
        patch = self._clean_patch(dog_id, updates)
        with self._lock:
            existing = self._dogs.get(dog_id)
            selected = self._selected_dog
            selected_matches = selected is not None and selected.id == dog_id

            if existing is None and not selected_matches:
                self._report_missing('update_dog', dog_id)
                return False

            if existing is not None:
                merged = dataclasses.replace(existing, **patch)
                self._dogs[dog_id] = merged
                if selected_matches:
                    self._selected_dog = merged
            else:
                self._report_missing('update_dog', dog_id)
                self._selected_dog = dataclasses.replace(selected, **patch)

            if selected_matches:
                self._persist_locked()
            snapshot = self._snapshot_locked()
        self._notify(snapshot)
        return existing is not None

    def delete_dog(self, dog_id: str) -> bool:
        with self._lock:
            found = self._dogs.pop(dog_id, None) is not None
            selected_matches = self._selected_dog is not None and self._selected_dog.id == dog_id
            if not found and not selected_matches:
                self._report_missing('delete_dog', dog_id)
                return False
            if not found:
                self._report_missing('delete_dog', dog_id)
            if selected_matches:
                self._selected_dog = None
                self._persist_locked()
            snapshot = self._snapshot_locked()
        self._notify(snapshot)
        return found

    def set_selected_dog(self, dog: Optional[Dog]) -> None:
        """roster 포함 여부와 무관하게 선택된 견을 교체합니다."""
        with self._lock:
            self._selected_dog = dog
            self._persist_locked()
            snapshot = self._snapshot_locked()
        self._notify(snapshot)

    def set_loading(self, loading: bool) -> None:
        with self._lock:
            self._is_loading = bool(loading)
            snapshot = self._snapshot_locked()
        self._notify(snapshot)

    def set_error(self, message: Optional[str]) -> None:
        with self._lock:
            self._last_error = message
            snapshot = self._snapshot_locked()
        self._notify(snapshot)

    def clear_error(self) -> None:
        self.set_error(None)

    # ------------------------------------------------------------------
    # 내부 도우미
    # ------------------------------------------------------------------
    def _clean_patch(self, dog_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        allowed = Dog.field_names() - {'id'}
        patch = {}
        for key, value in (updates or {}).items():
            if key == 'id':
                if value != dog_id:
                    logger.warning(f"Ignoring attempt to change immutable id of dog {dog_id}")
                continue
            if key not in allowed:
                logger.warning(f"Ignoring unknown dog field '{key}' in update for {dog_id}")
                continue
            try:
                patch[key] = self._coerce_field(key, value)
            except ValueError as e:
                logger.warning(f"Ignoring invalid value for dog field '{key}' in update for {dog_id}: {e}")
        return patch

    @staticmethod
    def _coerce_field(key: str, value: Any) -> Any:
        """patch 값을 Dog 필드 타입(Enum, date, datetime)으로 맞춥니다."""
        enum_types = {'gender': DogGender, 'status': DogStatus}
        if key in enum_types:
            if value is None:
                raise ValueError(f"{key} 는 비울 수 없습니다")
            return enum_types[key](value)
        if key == 'birth_date':
            return DateTimeUtils.to_date(value)
        if key in ('created_at', 'updated_at'):
            return DateTimeUtils.to_datetime(value)
        return value

    def _sync_selection_locked(self) -> bool:
        """선택된 견이 roster 에 있으면 roster 값으로 맞춥니다. 바뀌었으면 True."""
        selected = self._selected_dog
        if selected is None:
            return False
        current = self._dogs.get(selected.id)
        if current is None or current == selected:
            return False
        self._selected_dog = current
        return True

    def _report_missing(self, operation: str, dog_id: str) -> None:
        if self.strict_lookups:
            logger.warning(f"{operation}: dog {dog_id} is not in the roster")

    def _persist_locked(self) -> None:
        if self.persistence is None:
            return
        try:
            self.persistence.save(self._current_user, self._selected_dog)
        except Exception as e:
            logger.error(f"Failed to persist durable state: {e}", exc_info=True)

    def _notify(self, snapshot: StateSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"State listener failed: {e}", exc_info=True)


class RequestGenerations:
    """
    키별 요청 세대 번호. 원격 일괄 조회 전에 begin() 으로 번호를 받고,
    응답이 도착했을 때 is_current() 가 False 면 더 최근 요청이 시작된 것이므로 결과를 버립니다.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._latest: Dict[str, int] = {}

    def begin(self, key: str) -> int:
        with self._lock:
            token = self._latest.get(key, 0) + 1
            self._latest[key] = token
            return token

    def is_current(self, key: str, token: int) -> bool:
        with self._lock:
            return self._latest.get(key) == token
