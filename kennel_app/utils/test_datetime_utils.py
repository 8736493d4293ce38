# kennel_app/utils/test_datetime_utils.py
"""
시간 관리 유틸리티 테스트

사용법: python -m pytest kennel_app/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from kennel_app.utils.datetime_utils import DateTimeUtils

def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc

def test_parse_date_string():
    """날짜 문자열 파싱 테스트"""
    for date_string in ["2024-01-15", "2024/01/15", "2024-01-15T08:00:00Z"]:
        assert DateTimeUtils.parse_date_string(date_string) == date(2024, 1, 15)

def test_to_date_accepts_datetime_date_and_string():
    assert DateTimeUtils.to_date(datetime(2023, 5, 1, 12, tzinfo=timezone.utc)) == date(2023, 5, 1)
    assert DateTimeUtils.to_date(date(2023, 5, 1)) == date(2023, 5, 1)
    assert DateTimeUtils.to_date("2023-05-01") == date(2023, 5, 1)
    assert DateTimeUtils.to_date(None) is None

def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'birth_date': date(2020, 1, 15),
        'created_at': datetime(2024, 1, 15, 10, 30),
        'nested': {'event_date': date(2023, 12, 25)},
        'photo_urls': ['https://example.com/a.jpg'],
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert converted['birth_date'] == datetime(2020, 1, 15, tzinfo=timezone.utc)
    assert converted['created_at'].tzinfo == timezone.utc
    assert isinstance(converted['nested']['event_date'], datetime)
    assert converted['photo_urls'] == ['https://example.com/a.jpg']

def test_from_firestore_normalizes_offsets():
    kst = timezone(timedelta(hours=9))
    converted = DateTimeUtils.from_firestore({'created_at': datetime(2024, 1, 15, 9, 0, tzinfo=kst)})
    assert converted['created_at'] == datetime(2024, 1, 15, 0, 0, tzinfo=timezone.utc)

def test_to_iso_string_uses_z_suffix():
    assert DateTimeUtils.to_iso_string(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00Z"

def test_month_key():
    assert DateTimeUtils.month_key("2024-03-09") == "2024-03"
    assert DateTimeUtils.month_key(datetime(2024, 12, 31, 23, 0, tzinfo=timezone.utc)) == "2024-12"

def test_age_in_years():
    age = DateTimeUtils.age_in_years(date(2020, 1, 1), reference=date(2022, 1, 1))
    assert age == pytest.approx(2.0, abs=0.01)
    assert DateTimeUtils.age_in_years(date(2030, 1, 1), reference=date(2022, 1, 1)) == 0.0

def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")

    with pytest.raises(ValueError):
        DateTimeUtils.to_date(12345)
