# kennel_app/api/breeding/services.py
"""
번식 기록 서비스
교배 -> 임신 -> 출산으로 이어지는 litter 기록과 새끼의 부모 연결을 담당
"""

import logging
from typing import Any, Dict, List, Optional

from kennel_app.api.common.base import BaseRecordService
from kennel_app.api.dogs.services import PedigreeCycleError
from kennel_app.models.dog import DogGender
from kennel_app.models.litter import Litter
from kennel_app.services.firestore_service import LITTERS, RecordNotFoundError

logger = logging.getLogger(__name__)


class BreedingService(BaseRecordService):
    """번식(litter) 기록 관리 서비스"""

    def __init__(self, state, tables, dog_service):
        super().__init__(state, tables)
        self.dog_service = dog_service
        logger.info("BreedingService initialized with dependencies.")

    def _attach_parent_summaries(self, litters: List[Litter]) -> List[Dict[str, Any]]:
        parent_ids = [pid for litter in litters for pid in (litter.sire_id, litter.dam_id)]
        dogs = self.dogs_table.get_many(parent_ids)

        def summary(dog_id):
            dog = dogs.get(dog_id)
            if not dog:
                return None
            return {'name': dog.get('name'), 'breed': dog.get('breed'), 'gender': dog.get('gender')}

        return [{**litter.to_dict(), 'sire': summary(litter.sire_id), 'dam': summary(litter.dam_id)}
                for litter in litters]

    def list_litters(self, parent_id: Optional[str] = None, born: Optional[bool] = None) -> List[Dict[str, Any]]:
        """
        litter 기록 목록을 최신 등록순으로 조회합니다.
        parent_id 가 주어지면 그 견이 부견 또는 모견인 기록만 반환합니다.
        """
        with self._remote_call("list litters"):
            table = self.tables[LITTERS]
            if parent_id:
                rows = {row['id']: row for row in table.list(filters=[('sire_id', '==', parent_id)])}
                rows.update({row['id']: row for row in table.list(filters=[('dam_id', '==', parent_id)])})
                rows = list(rows.values())
            else:
                rows = table.list()
            litters = sorted((Litter.from_dict(row) for row in rows), key=lambda l: l.created_at, reverse=True)
            if born is not None:
                litters = [litter for litter in litters if litter.is_born == born]
            return self._attach_parent_summaries(litters)

    def create_litter(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """교배 기록을 등록합니다. 부견은 수컷, 모견은 암컷이어야 합니다."""
        with self._remote_call("create litter"):
            sire = self._ensure_dog_exists(data['sire_id'])
            dam = self._ensure_dog_exists(data['dam_id'])
            if sire.get('gender') != DogGender.MALE.value:
                raise ValueError("부견은 수컷이어야 합니다.")
            if dam.get('gender') != DogGender.FEMALE.value:
                raise ValueError("모견은 암컷이어야 합니다.")

            payload = dict(data)
            payload['puppy_ids'] = list(dict.fromkeys(payload.get('puppy_ids') or []))
            self._validate_puppies(payload['puppy_ids'], data['sire_id'], data['dam_id'])
            if payload['puppy_ids'] and payload.get('puppy_count') is None:
                payload['puppy_count'] = len(payload['puppy_ids'])
            row = self.tables[LITTERS].insert(payload)
            litter = Litter.from_dict(row)
            result = self._attach_parent_summaries([litter])[0]

        if litter.puppy_ids:
            self._link_puppies(litter)
        logger.info(f"Litter {litter.id} created (sire: {litter.sire_id}, dam: {litter.dam_id})")
        return result

    def record_birth(self, litter_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        출산 정보를 기록합니다.
        puppy_ids 가 없으면 저장된 목록을 유지하고, puppy_count 가 없으면 최종 puppy_ids 수를 사용합니다.
        각 새끼 견의 부모를 이 litter 의 부견/모견으로 지정하며, 검증은 litter 를 저장하기 전에 끝냅니다.
        """
        with self._remote_call(f"record birth {litter_id}"):
            existing = self.tables[LITTERS].get(litter_id)
            if existing is None:
                raise RecordNotFoundError(LITTERS, litter_id)

            changes = dict(data)
            if 'puppy_ids' in changes:
                puppy_ids = list(dict.fromkeys(changes['puppy_ids'] or []))
                changes['puppy_ids'] = puppy_ids
            else:
                puppy_ids = list(existing.get('puppy_ids') or [])
            if changes.get('puppy_count') is None:
                changes['puppy_count'] = len(puppy_ids)
            elif changes['puppy_count'] < len(puppy_ids):
                raise ValueError("puppy_count 는 등록된 새끼 수보다 작을 수 없습니다.")

            self._validate_puppies(puppy_ids, existing.get('sire_id'), existing.get('dam_id'))
            row = self.tables[LITTERS].update(litter_id, changes)
            litter = Litter.from_dict(row)
            result = self._attach_parent_summaries([litter])[0]

        self._link_puppies(litter)
        logger.info(f"Litter {litter_id} birth recorded: {litter.puppy_count} puppies")
        return result

    def _validate_puppies(self, puppy_ids: List[str], sire_id: Optional[str], dam_id: Optional[str]) -> None:
        for puppy_id in puppy_ids:
            if puppy_id in (sire_id, dam_id):
                raise PedigreeCycleError(f"부견/모견 '{puppy_id}' 은(는) 같은 litter 의 새끼가 될 수 없습니다.")
            self._ensure_dog_exists(puppy_id)
            self.dog_service.validate_parentage(puppy_id, sire_id, dam_id)

    def _link_puppies(self, litter: Litter) -> None:
        for puppy_id in litter.puppy_ids:
            self.dog_service.update_dog(puppy_id, {'sire_id': litter.sire_id, 'dam_id': litter.dam_id})

    def delete_litter(self, litter_id: str) -> None:
        """litter 기록만 삭제합니다. 새끼 견의 부모 정보는 그대로 남습니다."""
        self._delete_record(LITTERS, litter_id)
