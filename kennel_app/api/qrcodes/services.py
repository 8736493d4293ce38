# kennel_app/api/qrcodes/services.py
import logging
from typing import Any, Dict, List, Optional

from kennel_app.api.common.base import BaseRecordService
from kennel_app.models.dog import Dog
from kennel_app.models.qrcode import QrCode
from kennel_app.services.firestore_service import QRCODES
from kennel_app.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

DEFAULT_CONTACT = "관리자에게 문의하세요"


class QrCodeService(BaseRecordService):
    """
    견 프로필 QR 코드 관리 서비스.
    QR 코드는 견 한 마리당 하나이며 문서 ID로 dog_id 를 사용합니다.
    """

    def __init__(self, state, tables, site_url: str):
        super().__init__(state, tables)
        self.site_url = (site_url or '').rstrip('/')
        logger.info(f"QrCodeService initialized (site_url: {self.site_url})")

    def view_url(self, dog_id: str) -> str:
        return f"{self.site_url}/dog/{dog_id}"

    def build_payload(self, dog: Dog) -> Dict[str, Any]:
        """QR 코드와 함께 보여줄 견 공개 정보. 스캔 내용 자체는 view_url 입니다."""
        return {
            'id': dog.id,
            'name': dog.name,
            'breed': dog.breed,
            'birth_date': dog.birth_date.isoformat() if dog.birth_date else None,
            'gender': dog.gender.value,
            'contact': dog.owner_contact or DEFAULT_CONTACT,
            'view_url': self.view_url(dog.id),
        }

    def list_qrcodes(self) -> List[Dict[str, Any]]:
        with self._remote_call("list qrcodes"):
            codes = [QrCode.from_dict(row) for row in self.tables[QRCODES].list(order_by='updated_at', descending=True)]
            return self._attach_dog_summaries([code.to_dict() for code in codes])

    def get_qrcode(self, dog_id: str) -> Dict[str, Any]:
        """저장된 QR 코드(없으면 None)와 견 공개 정보를 함께 반환합니다."""
        with self._remote_call(f"get qrcode {dog_id}"):
            dog = Dog.from_dict(self._ensure_dog_exists(dog_id))
            row = self.tables[QRCODES].get(dog_id)
        return {
            'qrcode': QrCode.from_dict(row).to_dict() if row else None,
            'payload': self.build_payload(dog),
        }

    def upsert_qrcode(self, dog_id: str, qrcode_url: Optional[str] = None) -> Dict[str, Any]:
        """QR 코드를 만들거나 갱신합니다. URL을 주지 않으면 견 프로필 view_url 을 사용합니다."""
        with self._remote_call(f"upsert qrcode {dog_id}"):
            dog = Dog.from_dict(self._ensure_dog_exists(dog_id))
            row = self.tables[QRCODES].upsert(dog_id, {
                'dog_id': dog_id,
                'qrcode_url': qrcode_url or self.view_url(dog_id),
                'updated_at': DateTimeUtils.now(),
            })
        logger.info(f"QR code saved for dog {dog_id}")
        return {
            'qrcode': QrCode.from_dict(row).to_dict(),
            'payload': self.build_payload(dog),
        }
