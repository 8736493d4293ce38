# kennel_app/api/finance/services.py
"""
재무 기록 서비스
구매(입고), 판매(분양), 지출 기록과 합계 요약을 담당
"""

import logging
from typing import Any, Dict, List, Optional

from kennel_app.api.common.base import BaseRecordService
from kennel_app.models.dog import DogStatus
from kennel_app.models.finance import Purchase, Sale, Expense, FinancialSummary
from kennel_app.services.firestore_service import DOGS, PURCHASES, SALES, EXPENSES

logger = logging.getLogger(__name__)

# 테이블별 (모델, 날짜 필드)
RECORD_TYPES = {
    PURCHASES: (Purchase, 'purchase_date'),
    SALES: (Sale, 'sale_date'),
    EXPENSES: (Expense, 'date'),
}


class FinanceService(BaseRecordService):
    """재무 기록 관리 서비스"""

    def __init__(self, state, tables, dog_service):
        super().__init__(state, tables)
        self.dog_service = dog_service
        logger.info("FinanceService initialized with dependencies.")

    def list_records(self, kind: str, dog_id: Optional[str] = None, start_date=None, end_date=None,
                     category: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        기록 목록을 최신 날짜순으로 조회합니다.
        각 기록에는 조회 시점의 견 요약('dog')이 붙습니다.
        """
        model, date_field = RECORD_TYPES[kind]
        filters = [('category', '==', category)] if kind == EXPENSES and category else []
        records = self._list_models(kind, model.from_dict, date_field,
                                    dog_id=dog_id, start_date=start_date, end_date=end_date,
                                    filters=filters)
        with self._remote_call(f"join dogs for {kind}"):
            return self._attach_dog_summaries([record.to_dict() for record in records])

    def _create_record(self, kind: str, data: Dict[str, Any]) -> Dict[str, Any]:
        model, _ = RECORD_TYPES[kind]
        with self._remote_call(f"create {kind}"):
            self._ensure_dog_exists(data['dog_id'])
            row = self.tables[kind].insert(data)
            record = model.from_dict(row)
            joined = self._attach_dog_summaries([record.to_dict()])[0]
        logger.info(f"{kind} record {record.id} created for dog {record.dog_id}")
        return joined

    def create_purchase(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_record(PURCHASES, data)

    def create_sale(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """판매 기록을 만들고 해당 견의 상태를 sold 로 바꿉니다."""
        sale = self._create_record(SALES, data)
        self.dog_service.mark_status(sale['dog_id'], DogStatus.SOLD)
        return sale

    def create_expense(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_record(EXPENSES, data)

    def delete_record(self, kind: str, record_id: str) -> None:
        self._delete_record(kind, record_id)

    def get_summary(self) -> FinancialSummary:
        """
        전체 기간 합계를 계산합니다.
        net_profit = 판매 합계 - 구매 합계 - 지출 합계, dog_count 는 현재 보유(owned) 중인 견 수.
        """
        with self._remote_call("financial summary"):
            totals = {}
            for kind in (PURCHASES, SALES, EXPENSES):
                totals[kind] = sum(float(row.get('amount') or 0) for row in self.tables[kind].list())
            owned = self.tables[DOGS].list(filters=[('status', '==', DogStatus.OWNED.value)])

        return FinancialSummary(
            total_purchases=totals[PURCHASES],
            total_sales=totals[SALES],
            total_expenses=totals[EXPENSES],
            dog_count=len(owned),
        )
