# kennel_app/api/growth/services.py
import logging
from typing import Any, Dict, List, Optional

from kennel_app.api.common.base import BaseRecordService
from kennel_app.models.growth_event import GrowthEvent
from kennel_app.services.firestore_service import GROWTH_EVENTS

logger = logging.getLogger(__name__)


class GrowthService(BaseRecordService):
    """성장 기록 서비스"""

    def list_events(self, dog_id: Optional[str] = None, start_date=None, end_date=None) -> List[Dict[str, Any]]:
        events = self._list_models(GROWTH_EVENTS, GrowthEvent.from_dict, 'event_date',
                                   dog_id=dog_id, start_date=start_date, end_date=end_date)
        with self._remote_call("join dogs for growth events"):
            return self._attach_dog_summaries([event.to_dict() for event in events])

    def create_event(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """성장 기록을 등록합니다."""
        with self._remote_call("create growth event"):
            self._ensure_dog_exists(data['dog_id'])
            event = GrowthEvent.from_dict(self.tables[GROWTH_EVENTS].insert(data))
            joined = self._attach_dog_summaries([event.to_dict()])[0]
        logger.info(f"Growth event {event.id} created for dog {event.dog_id}")
        return joined

    def delete_event(self, event_id: str) -> None:
        self._delete_record(GROWTH_EVENTS, event_id)
