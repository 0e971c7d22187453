from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from .config import DateFormats, DiagnosticCodes, Patterns


def normalize_text(raw: Optional[str]) -> Optional[str]:
    """앞뒤 공백 제거, 빈 문자열은 None"""
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


def _to_decimal(s: str) -> Optional[Decimal]:
    try:
        return Decimal(s)
    except InvalidOperation:
        return None


def normalize_decimal(raw: Optional[str]) -> Tuple[Optional[Decimal], Optional[str]]:
    """
    소수 문자열을 Decimal로 정규화 (공임 시간, 수량)
    반환: (value, error_code)

    - 빈 값 -> (None, None)  값 없음은 오류가 아님
    - 해석 불가 -> (None, "invalid_number")
    - 음수는 그대로 반환 (부호 판단은 호출 측)
    """
    s = normalize_text(raw)
    if s is None:
        return None, None

    if not Patterns.DECIMAL.match(s):
        return None, DiagnosticCodes.INVALID_NUMBER

    value = _to_decimal(s)
    if value is None:
        return None, DiagnosticCodes.INVALID_NUMBER
    return value, None


def normalize_money(raw: Optional[str]) -> Tuple[Optional[Decimal], Optional[str]]:
    """
    금액 문자열을 Decimal로 정규화
    예: "6,929.96" -> Decimal("6929.96") / "$12.00" -> Decimal("12.00")
    """
    s = normalize_text(raw)
    if s is None:
        return None, None

    m = Patterns.MONEY.match(s)
    if not m:
        return None, DiagnosticCodes.INVALID_NUMBER

    value = _to_decimal(m.group("num").replace(",", ""))
    if value is None:
        return None, DiagnosticCodes.INVALID_NUMBER
    if m.group("sign"):
        value = -value
    return value, None


def normalize_integer(raw: Optional[str]) -> Tuple[Optional[int], Optional[str]]:
    """
    정수 문자열 정규화 (주행거리)
    예: "45,210" -> 45210
    """
    s = normalize_text(raw)
    if s is None:
        return None, None

    if not Patterns.INTEGER.match(s):
        return None, DiagnosticCodes.INVALID_NUMBER

    # int 변환 자릿수 제한(sys.get_int_max_str_digits)을 넘으면 ValueError
    try:
        return int(s.replace(",", "")), None
    except ValueError:
        return None, DiagnosticCodes.INVALID_NUMBER


def normalize_date(raw: Optional[str]) -> Tuple[Optional[date], Optional[str]]:
    """
    날짜 문자열을 date로 정규화
    반환: (date, error_code)

    - 시간 꼬리("2024-01-01T10:00:00", "01/15/2024 08:00 AM")는 잘라낸다
    - 빈 값 -> (None, None)
    - 해석 실패 -> (None, "invalid_date")
    """
    s = normalize_text(raw)
    if s is None:
        return None, None

    m = Patterns.DATE_TIME_TAIL.match(s)
    if m:
        s = m.group("date")

    for fmt in DateFormats.FORMATS:
        try:
            return datetime.strptime(s, fmt).date(), None
        except ValueError:
            continue

    return None, DiagnosticCodes.INVALID_DATE


def normalize_vin(raw: Optional[str]) -> Optional[str]:
    """VIN 정규화: 공백 제거 후 대문자"""
    s = normalize_text(raw)
    if s is None:
        return None
    return "".join(s.split()).upper()
