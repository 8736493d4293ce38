# kennel_app/models/finance.py
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum
from typing import Optional, Dict, Any

from kennel_app.utils.datetime_utils import DateTimeUtils

class ExpenseCategory(Enum):
    MEDICAL = "medical"
    FOOD = "food"
    GROOMING = "grooming"
    OTHER = "other"

@dataclass
class Purchase:
    """Firestore 'purchases' 컬렉션 문서 구조 (입고/구매 기록)."""
    id: str
    dog_id: str
    amount: float
    purchase_date: date
    supplier: Optional[str] = None
    supplier_contact: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Purchase":
        return cls(
            id=data['id'], dog_id=data['dog_id'], amount=float(data['amount']),
            purchase_date=DateTimeUtils.to_date(data['purchase_date']),
            supplier=data.get('supplier'), supplier_contact=data.get('supplier_contact'),
            notes=data.get('notes'),
            created_at=DateTimeUtils.to_datetime(data.get('created_at')) or DateTimeUtils.now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class Sale:
    """Firestore 'sales' 컬렉션 문서 구조 (분양/판매 기록)."""
    id: str
    dog_id: str
    amount: float
    sale_date: date
    buyer_name: Optional[str] = None
    buyer_contact: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sale":
        return cls(
            id=data['id'], dog_id=data['dog_id'], amount=float(data['amount']),
            sale_date=DateTimeUtils.to_date(data['sale_date']),
            buyer_name=data.get('buyer_name'), buyer_contact=data.get('buyer_contact'),
            notes=data.get('notes'),
            created_at=DateTimeUtils.to_datetime(data.get('created_at')) or DateTimeUtils.now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class Expense:
    """Firestore 'expenses' 컬렉션 문서 구조 (의료비, 사료비 등 지출)."""
    id: str
    dog_id: str
    category: ExpenseCategory
    amount: float
    date: date
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        return cls(
            id=data['id'], dog_id=data['dog_id'],
            category=ExpenseCategory(data.get('category') or 'other'),
            amount=float(data['amount']),
            date=DateTimeUtils.to_date(data['date']),
            notes=data.get('notes'),
            created_at=DateTimeUtils.to_datetime(data.get('created_at')) or DateTimeUtils.now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        expense_dict = asdict(self)
        expense_dict['category'] = self.category.value
        return expense_dict

@dataclass
class FinancialSummary:
    """저장되지 않는 파생 값. 구매/판매/지출 합계와 보유 견 수."""
    total_purchases: float = 0.0
    total_sales: float = 0.0
    total_expenses: float = 0.0
    dog_count: int = 0

    @property
    def net_profit(self) -> float:
        return self.total_sales - self.total_purchases - self.total_expenses

    def to_dict(self) -> Dict[str, Any]:
        summary = asdict(self)
        summary['net_profit'] = self.net_profit
        return summary
