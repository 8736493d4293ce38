# kennel_app/api/dogs/services.py
import logging
from typing import Dict, Any, List, Optional

from kennel_app.api.common.base import BaseRecordService
from kennel_app.models.dog import Dog, DogStatus
from kennel_app.services.firestore_service import DOGS, TableClient
from kennel_app.store.state_store import AppStateStore, RequestGenerations


class PedigreeCycleError(ValueError):
    """부견/모견 지정으로 견이 자기 자신의 조상이 되는 경우 발생합니다."""


class DogService(BaseRecordService):
    """견 프로필 관리와 상태 저장소의 roster 동기화를 전담하는 서비스."""

    def __init__(self, state: AppStateStore, tables: Dict[str, TableClient],
                 generations: Optional[RequestGenerations] = None):
        super().__init__(state, tables)
        self.generations = generations or RequestGenerations()
        logging.info("DogService initialized with dependencies.")

    def refresh_dogs(self, status: Optional[str] = None, breed: Optional[str] = None,
                     q: Optional[str] = None) -> List[Dog]:
        """
        원격 저장소에서 견 목록을 다시 읽습니다.
        필터가 없을 때만 roster 를 통째로 교체하며, 그 사이 더 최근의 조회가 시작됐다면
        이 응답은 roster 에 반영하지 않습니다.
        """
        filters = []
        if status:
            filters.append(('status', '==', status))
        if breed:
            filters.append(('breed', '==', breed))
        is_full_refresh = not filters and not q

        token = self.generations.begin(DOGS) if is_full_refresh else None
        if is_full_refresh:
            self.state.set_loading(True)
        try:
            with self._remote_call("refresh dogs"):
                rows = self.tables[DOGS].list(order_by='created_at', filters=filters)
            dogs = [Dog.from_dict(row) for row in rows]
            if q:
                needle = q.strip().lower()
                dogs = [dog for dog in dogs if needle in dog.name.lower()]

            if is_full_refresh:
                if self.generations.is_current(DOGS, token):
                    self.state.set_dogs(dogs)
                else:
                    logging.info(f"Discarding superseded dog roster response (token {token})")
            return dogs
        finally:
            if is_full_refresh and self.generations.is_current(DOGS, token):
                self.state.set_loading(False)

    def get_dog(self, dog_id: str) -> Dog:
        """견 한 마리를 조회합니다. 없으면 RecordNotFoundError."""
        with self._remote_call(f"get dog {dog_id}"):
            row = self._ensure_dog_exists(dog_id)
        return Dog.from_dict(row)

    def create_dog(self, dog_data: Dict[str, Any]) -> Dog:
        """견을 등록하고 roster 에 추가합니다."""
        with self._remote_call("create dog"):
            self.validate_parentage(None, dog_data.get('sire_id'), dog_data.get('dam_id'))
            payload = dict(dog_data)
            payload.setdefault('status', DogStatus.OWNED.value)
            payload.setdefault('photo_urls', [])
            row = self.tables[DOGS].insert(payload)
        new_dog = Dog.from_dict(row)
        self.state.add_dog(new_dog)
        logging.info(f"Dog {new_dog.id} registered ({new_dog.name})")
        return new_dog

    def update_dog(self, dog_id: str, update_data: Dict[str, Any]) -> Dog:
        """견 프로필을 부분 업데이트하고, roster 와 선택된 견에 같은 변경을 반영합니다."""
        if not update_data:
            raise ValueError("수정할 데이터가 제공되지 않았습니다.")

        with self._remote_call(f"update dog {dog_id}"):
            current = self._ensure_dog_exists(dog_id)
            if 'sire_id' in update_data or 'dam_id' in update_data:
                self.validate_parentage(
                    dog_id,
                    update_data.get('sire_id', current.get('sire_id')),
                    update_data.get('dam_id', current.get('dam_id')),
                )
            row = self.tables[DOGS].update(dog_id, update_data)

        updated_dog = Dog.from_dict(row)
        patch = {name: getattr(updated_dog, name) for name in set(update_data) | {'updated_at'}
                 if name in Dog.field_names()}
        self.state.update_dog(dog_id, patch)
        return updated_dog

    def delete_dog(self, dog_id: str) -> None:
        """견을 삭제합니다. 이 견을 참조하는 기록의 정리는 원격 저장소의 책임입니다."""
        self._delete_record(DOGS, dog_id)
        self.state.delete_dog(dog_id)

    def validate_parentage(self, dog_id: Optional[str], sire_id: Optional[str], dam_id: Optional[str]) -> None:
        """
        부견/모견 지정이 유효한지 검사합니다.
        - 지정된 부모는 존재해야 함
        - 견은 자기 자신의 부모가 될 수 없음
        - 부모에서 위로 올라가는 계보에 견 자신이 나타나면 안 됨 (순환 금지)
        """
        if sire_id and dam_id and sire_id == dam_id:
            raise ValueError("부견과 모견은 같은 견일 수 없습니다.")

        for role, parent_id in (('부견', sire_id), ('모견', dam_id)):
            if not parent_id:
                continue
            if dog_id and parent_id == dog_id:
                raise PedigreeCycleError(f"견은 자기 자신의 {role}이 될 수 없습니다.")
            if self.dogs_table.get(parent_id) is None:
                raise ValueError(f"{role} '{parent_id}' 이(가) 존재하지 않습니다.")
            if dog_id and self._has_ancestor(parent_id, dog_id):
                raise PedigreeCycleError(f"{role} 지정이 계보 순환을 만듭니다: {dog_id} 가 {parent_id} 의 조상입니다.")

    def _has_ancestor(self, start_id: str, target_id: str) -> bool:
        """start_id 의 조상 중에 target_id 가 있는지 계보를 따라 올라가며 확인합니다."""
        visited = set()
        pending = [start_id]
        while pending:
            current_id = pending.pop()
            if current_id in visited:
                continue
            visited.add(current_id)
            row = self.dogs_table.get(current_id)
            if not row:
                continue
            for parent_id in (row.get('sire_id'), row.get('dam_id')):
                if not parent_id:
                    continue
                if parent_id == target_id:
                    return True
                pending.append(parent_id)
        return False

    def get_pedigree(self, dog_id: str, depth: int = 3) -> Dict[str, Any]:
        """
        견을 뿌리로 하는 계보 트리를 depth 세대까지 구성합니다.
        각 노드: {'dog': {...}, 'sire': 노드 | None, 'dam': 노드 | None}
        """
        with self._remote_call(f"pedigree {dog_id}"):
            root = self._ensure_dog_exists(dog_id)
            return self._build_pedigree_node(root, 1, depth, set())

    def _build_pedigree_node(self, row: Dict[str, Any], level: int, depth: int, path: set) -> Dict[str, Any]:
        node = {'dog': Dog.from_dict(row).to_dict(), 'sire': None, 'dam': None}
        if level >= depth or row['id'] in path:
            return node
        path = path | {row['id']}
        for rel in ('sire', 'dam'):
            parent_id = row.get(f'{rel}_id')
            if not parent_id:
                continue
            parent = self.dogs_table.get(parent_id)
            if parent:
                node[rel] = self._build_pedigree_node(parent, level + 1, depth, path)
        return node

    def find_dog(self, dog_id: str) -> Dog:
        """roster 에 있으면 roster 값을, 없으면 원격 저장소에서 조회합니다."""
        cached = self.state.get_dog(dog_id)
        if cached is not None:
            return cached
        return self.get_dog(dog_id)

    def mark_status(self, dog_id: str, status: DogStatus) -> Dog:
        """다른 도메인(판매 등)에서 견 상태를 바꿀 때 사용합니다."""
        return self.update_dog(dog_id, {'status': status.value})
