# kennel_app/api/analysis/data_collector.py
"""
경영 분석용 사업 지표 수집기
원격 저장소의 전체 기록을 읽어 개요/재무/건강/번식/성과 지표를 계산
"""

import logging
from collections import Counter, defaultdict
from typing import Any, Dict, List

from kennel_app.models.dog import Dog, DogStatus
from kennel_app.models.finance import Purchase, Sale, Expense
from kennel_app.models.health_record import HealthRecord, HealthRecordType
from kennel_app.models.litter import Litter
from kennel_app.services.firestore_service import (
    DOGS, PURCHASES, SALES, EXPENSES, LITTERS, HEALTH_RECORDS, TableClient
)
from kennel_app.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

# 치료 기록 설명의 키워드 -> 질환 분류
HEALTH_ISSUE_KEYWORDS = (
    ('피부 질환', ('피부', '피부염', 'skin')),
    ('소화기', ('소화', '설사', '구토', 'diarrhea')),
    ('호흡기', ('호흡', '기침', 'cough')),
    ('안과 질환', ('눈', '안구', 'eye')),
    ('관절/뼈', ('관절', '뼈', '골절')),
    ('감기/발열', ('감기', '발열', 'fever')),
)
OTHER_ISSUE = '기타'

MONTHLY_TREND_MONTHS = 12
HEALTH_TREND_MONTHS = 6
POPULAR_BREED_LIMIT = 10


class DataCollectionError(Exception):
    """지표 수집 중 원격 저장소 조회가 실패했을 때 발생합니다."""


def _ratio(numerator: float, denominator: float, digits: int = 1, scale: float = 100.0) -> float:
    if not denominator:
        return 0
    return round(numerator / denominator * scale, digits)


def _last_months(trends: Dict[str, Dict[str, Any]], months: int) -> List[Dict[str, Any]]:
    """'YYYY-MM' 키로 정렬해 최근 months 개월만 [{'month': ..., ...}] 형태로 반환"""
    return [{'month': month, **values} for month, values in sorted(trends.items())[-months:]]


def categorize_health_issue(description: str) -> str:
    lowered = (description or '').lower()
    for category, keywords in HEALTH_ISSUE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return OTHER_ISSUE


def season_of(month: int) -> str:
    if 3 <= month <= 5:
        return 'spring'
    if 6 <= month <= 8:
        return 'summer'
    if 9 <= month <= 11:
        return 'autumn'
    return 'winter'


class DataCollector:
    """
    경영 분석 API 에 넘길 사업 지표 JSON 을 만듭니다.
    현재 보유(owned) 중인 견을 분양 가능 재고로 간주합니다.
    """

    def __init__(self, tables: Dict[str, TableClient]):
        self.tables = tables

    def _load(self, table: str, factory) -> List[Any]:
        return [factory(row) for row in self.tables[table].list()]

    def collect_all(self) -> Dict[str, Any]:
        """모든 지표를 수집합니다. 조회나 변환이 실패하면 DataCollectionError."""
        try:
            dogs = self._load(DOGS, Dog.from_dict)
            purchases = self._load(PURCHASES, Purchase.from_dict)
            sales = self._load(SALES, Sale.from_dict)
            expenses = self._load(EXPENSES, Expense.from_dict)
            health_records = self._load(HEALTH_RECORDS, HealthRecord.from_dict)
            litters = self._load(LITTERS, Litter.from_dict)
        except Exception as e:
            logger.error(f"데이터 수집 실패: {e}", exc_info=True)
            raise DataCollectionError("사업 데이터를 수집할 수 없습니다.") from e

        logger.info(f"Business data loaded: {len(dogs)} dogs, {len(sales)} sales, "
                    f"{len(health_records)} health records, {len(litters)} litters")
        return {
            'overview': self.collect_overview(dogs),
            'financial': self.collect_financial(purchases, sales, expenses),
            'health': self.collect_health(health_records, dogs),
            'breeding': self.collect_breeding(litters),
            'performance': self.collect_performance(dogs, sales),
            'collected_at': DateTimeUtils.to_iso_string(DateTimeUtils.now()),
        }

    def collect_overview(self, dogs: List[Dog]) -> Dict[str, Any]:
        statuses = Counter(dog.status for dog in dogs)
        ages = [DateTimeUtils.age_in_years(dog.birth_date) for dog in dogs if dog.birth_date]
        return {
            'total_dogs': len(dogs),
            'active_dogs': statuses[DogStatus.OWNED],
            'sold_dogs': statuses[DogStatus.SOLD],
            'average_age': round(sum(ages) / len(ages), 1) if ages else 0,
            'breed_distribution': dict(Counter(dog.breed for dog in dogs)),
        }

    def collect_financial(self, purchases: List[Purchase], sales: List[Sale],
                          expenses: List[Expense]) -> Dict[str, Any]:
        """구매 비용과 운영 지출을 합쳐 total_expenses 로 봅니다."""
        total_revenue = sum(sale.amount for sale in sales)
        total_purchase_costs = sum(purchase.amount for purchase in purchases)
        total_operating = sum(expense.amount for expense in expenses)
        total_expenses = total_purchase_costs + total_operating
        net_profit = total_revenue - total_expenses

        trends = defaultdict(lambda: {'revenue': 0.0, 'expenses': 0.0, 'profit': 0.0})
        for sale in sales:
            trends[DateTimeUtils.month_key(sale.sale_date)]['revenue'] += sale.amount
        for purchase in purchases:
            trends[DateTimeUtils.month_key(purchase.purchase_date)]['expenses'] += purchase.amount
        for expense in expenses:
            trends[DateTimeUtils.month_key(expense.date)]['expenses'] += expense.amount
        for values in trends.values():
            values['profit'] = values['revenue'] - values['expenses']

        categories = defaultdict(float)
        for expense in expenses:
            categories[expense.category.value] += expense.amount

        return {
            'total_revenue': total_revenue,
            'total_expenses': total_expenses,
            'net_profit': net_profit,
            'profit_margin': _ratio(net_profit, total_revenue, digits=2),
            'average_sale_price': _ratio(total_revenue, len(sales), digits=2, scale=1),
            'average_purchase_price': _ratio(total_purchase_costs, len(purchases), digits=2, scale=1),
            'monthly_trends': _last_months(trends, MONTHLY_TREND_MONTHS),
            'expense_categories': dict(categories),
        }

    def collect_health(self, records: List[HealthRecord], dogs: List[Dog]) -> Dict[str, Any]:
        vaccinated = {r.dog_id for r in records if r.type == HealthRecordType.VACCINATION}
        treatments = [r for r in records if r.type == HealthRecordType.TREATMENT]
        treatment_costs = sum(r.cost or 0 for r in treatments)

        trends = defaultdict(lambda: {'treatments': 0, 'vaccinations': 0, 'checkups': 0})
        trend_key = {
            HealthRecordType.TREATMENT: 'treatments',
            HealthRecordType.VACCINATION: 'vaccinations',
            HealthRecordType.CHECKUP: 'checkups',
        }
        for record in records:
            trends[DateTimeUtils.month_key(record.date)][trend_key[record.type]] += 1

        return {
            'total_health_records': len(records),
            'vaccination_coverage': _ratio(len(vaccinated), len(dogs)),
            'treatment_costs': treatment_costs,
            'common_health_issues': dict(Counter(
                categorize_health_issue(r.description) for r in treatments if r.description
            )),
            'average_health_cost_per_dog': _ratio(treatment_costs, len(dogs), digits=2, scale=1),
            'recent_health_trends': _last_months(trends, HEALTH_TREND_MONTHS),
        }

    def collect_breeding(self, litters: List[Litter]) -> Dict[str, Any]:
        today = DateTimeUtils.today()
        born = [litter for litter in litters if litter.is_born]
        active = [litter for litter in litters
                  if not litter.is_born and litter.expected_birth_date and litter.expected_birth_date > today]
        litter_sizes = sum(litter.puppy_count or 0 for litter in born)

        trends = defaultdict(lambda: {'births': 0, 'pregnancies': 0})
        for litter in litters:
            if litter.mating_date:
                trends[DateTimeUtils.month_key(litter.mating_date)]['pregnancies'] += 1
            if litter.birth_date:
                trends[DateTimeUtils.month_key(litter.birth_date)]['births'] += 1

        return {
            'total_litters': len(litters),
            'active_pregnancies': len(active),
            'completed_births': len(born),
            'average_litter_size': _ratio(litter_sizes, len(born), scale=1),
            'breeding_success_rate': _ratio(len(born), len(litters)),
            'monthly_births': _last_months(trends, MONTHLY_TREND_MONTHS),
        }

    def collect_performance(self, dogs: List[Dog], sales: List[Sale]) -> Dict[str, Any]:
        in_stock = sum(1 for dog in dogs if dog.status == DogStatus.OWNED)
        dogs_by_id = {dog.id: dog for dog in dogs}

        # 견 등록일부터 판매일까지의 평균 일수
        sale_days = []
        for sale in sales:
            dog = dogs_by_id.get(sale.dog_id)
            if not dog:
                continue
            days = (DateTimeUtils.to_datetime(sale.sale_date) - dog.created_at).total_seconds() / 86400
            if days > 0:
                sale_days.append(days)

        breed_counts = Counter(dog.breed for dog in dogs)
        breed_sales = defaultdict(list)
        for sale in sales:
            dog = dogs_by_id.get(sale.dog_id)
            if dog:
                breed_sales[dog.breed].append(sale.amount)
        popular_breeds = [
            {
                'breed': breed,
                'count': count,
                'average_price': _ratio(sum(breed_sales[breed]), len(breed_sales[breed]), digits=2, scale=1),
            }
            for breed, count in breed_counts.most_common(POPULAR_BREED_LIMIT)
        ]

        seasons = {'spring': 0, 'summer': 0, 'autumn': 0, 'winter': 0}
        for sale in sales:
            seasons[season_of(sale.sale_date.month)] += 1

        return {
            'sales_conversion_rate': _ratio(len(sales), in_stock + len(sales), digits=2),
            'average_time_to_sale': round(sum(sale_days) / len(sale_days), 1) if sale_days else 0,
            # 고객 데이터가 없어 재구매율은 계산하지 않습니다.
            'customer_retention': 0,
            'seasonal_trends': seasons,
            'popular_breeds': popular_breeds,
        }
